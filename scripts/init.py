"""
Initialize the Interview Coach backend
- Create the .env file
- Create the database tables
"""

import os
import shutil
import sys
from pathlib import Path

def check_environment():
    """Create backend/.env from the template if it is missing"""
    env_file = Path("backend/.env")
    if env_file.exists():
        print("backend/.env exists")
        return True

    example_file = Path("backend/.env.example")
    if not example_file.exists():
        print("backend/.env.example not found")
        return False

    shutil.copy(example_file, env_file)
    print("Created backend/.env - set LLM_API_KEY before starting the API")
    return True

def initialize_database():
    """Create all tables in the configured database"""
    sys.path.insert(0, str(Path("backend").resolve()))
    os.chdir("backend")
    try:
        from app.config import settings
        from app.models.database import init_db

        init_db()
        print(f"Database ready: {settings.DATABASE_URL}")
    finally:
        os.chdir("..")

def main():
    """Main initialization function"""
    print("Interview Coach - Initialization")
    print("================================")

    # Change to project root directory
    script_dir = Path(__file__).parent
    project_root = script_dir.parent
    os.chdir(project_root)
    print(f"Working directory: {project_root}")

    if not check_environment():
        sys.exit(1)

    initialize_database()

    print("\nInitialization complete!")
    print("\nNext steps:")
    print("1. Install dependencies: pip install -e '.[test]'")
    print("2. Start the API: cd backend && uvicorn app.main:app --reload")

if __name__ == "__main__":
    main()
