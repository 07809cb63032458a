import os

# Point the app at a throwaway database before weekplan is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_weekplan.db")
