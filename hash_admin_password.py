import sys
from getpass import getpass
from detailing_admin.core.security import hash_password, verify_password


def build_password_hash(password: str) -> str:
    hashed = hash_password(password)
    if not verify_password(password, hashed):
        raise RuntimeError("Generated hash does not verify")
    return hashed


def main():
    if len(sys.argv) > 2:
        print("Usage: python hash_admin_password.py [password]")
        sys.exit(1)

    password = sys.argv[1] if len(sys.argv) == 2 else getpass("Admin password: ")

    if not password or not password.strip():
        print("Error: password cannot be empty")
        sys.exit(1)

    try:
        hashed = build_password_hash(password)
    except Exception as e:
        print(f"Error hashing password: {str(e)}")
        sys.exit(1)

    print("Add this line to your .env file:")
    print(f"ADMIN_PASSWORD_HASH={hashed}")
    sys.exit(0)


if __name__ == "__main__":
    main()
