"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SCHOOL_NAME = "SMP NEGERI 4 BALIKPAPAN"
DEFAULT_JOURNAL_CATEGORIES = [
    "Belajar",
    "Ibadah",
    "Olahraga",
    "Membantu Orang Tua",
    "Sakit",
    "Izin",
]
DEFAULT_ATTENDANCE_WINDOW = {"startTime": "07:00", "endTime": "09:00"}
DEFAULT_THEME = "light"

DEFAULT_PAGE_SIZE = 10

RESET_ACTION = "reset_application_data"

NO_STORE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}

# Roster restored on first listing and on reset. Passwords are plain here and
# hashed before they reach a repository.
INITIAL_USERS = [
    {
        "id": "u1",
        "name": "Administrator",
        "role": "ADMIN",
        "nip": "admin",
        "password": "admin123",
        "avatar": "https://i.pravatar.cc/150?u=u1",
    },
    {
        "id": "u2",
        "name": "Budi Santoso",
        "role": "TEACHER",
        "nip": "198501012010011001",
        "password": "guru123",
        "avatar": "https://i.pravatar.cc/150?u=u2",
        "className": "7A",
    },
    {
        "id": "u3",
        "name": "Andi Pratama",
        "role": "STUDENT",
        "nisn": "123456",
        "password": "abc123",
        "avatar": "https://i.pravatar.cc/150?u=u3",
        "className": "7A",
        "parentId": "u5",
    },
    {
        "id": "u4",
        "name": "Siti Aminah",
        "role": "STUDENT",
        "nisn": "654321",
        "password": "siswa123",
        "avatar": "https://i.pravatar.cc/150?u=u4",
        "className": "7A",
    },
    {
        "id": "u5",
        "name": "Hendra Pratama",
        "role": "PARENT",
        "nik": "6471010101800001",
        "password": "ortu123",
        "avatar": "https://i.pravatar.cc/150?u=u5",
    },
]
