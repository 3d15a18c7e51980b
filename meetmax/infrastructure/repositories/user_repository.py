"""Repository for User persistence."""

import logging
import sqlite3
import threading
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional, Union

from meetmax.domain.exceptions import ConflictAlreadyRegistered, EmailAlreadyTaken
from meetmax.domain.models.user import Gender, User

logger = logging.getLogger(__name__)


class SQLiteUserRepository:
    """Repository for managing User entities in SQLite."""

    def __init__(self, db_path: Union[str, Path]):
        db_path = str(db_path)
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self.db_path = db_path
        self._conn = sqlite3.connect(db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._initialize_table()

    def _initialize_table(self) -> None:
        """Create users table if it doesn't exist."""
        with self._lock, self._conn:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    email TEXT UNIQUE NOT NULL,
                    firstname TEXT NOT NULL,
                    lastname TEXT NOT NULL,
                    password_hash TEXT NOT NULL,
                    date_of_birth TEXT NOT NULL,
                    gender TEXT NOT NULL,
                    is_verified INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

    def create(self, user: User) -> User:
        """Insert a new user; the unique email index rejects duplicates."""
        now = datetime.utcnow()
        try:
            with self._lock, self._conn:
                cursor = self._conn.execute(
                    """
                    INSERT INTO users (
                        email, firstname, lastname, password_hash, date_of_birth,
                        gender, is_verified, created_at, updated_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        user.email,
                        user.firstname,
                        user.lastname,
                        user.password_hash,
                        user.date_of_birth.isoformat(),
                        user.gender.value,
                        int(user.is_verified),
                        now.isoformat(),
                        now.isoformat(),
                    ),
                )
        except sqlite3.IntegrityError as exc:
            logger.info("Rejected duplicate registration for %s", user.email)
            raise ConflictAlreadyRegistered() from exc

        user.id = cursor.lastrowid
        user.created_at = now
        user.updated_at = now
        return user

    def save(self, user: User) -> User:
        """Persist every mutable field of an existing user."""
        now = datetime.utcnow()
        try:
            with self._lock, self._conn:
                self._conn.execute(
                    """
                    UPDATE users
                    SET email = ?, firstname = ?, lastname = ?, password_hash = ?,
                        date_of_birth = ?, gender = ?, is_verified = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        user.email,
                        user.firstname,
                        user.lastname,
                        user.password_hash,
                        user.date_of_birth.isoformat(),
                        user.gender.value,
                        int(user.is_verified),
                        now.isoformat(),
                        user.id,
                    ),
                )
        except sqlite3.IntegrityError as exc:
            raise EmailAlreadyTaken() from exc

        user.updated_at = now
        return user

    def find_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID. IDs outside SQLite's integer range match nothing."""
        try:
            with self._lock:
                row = self._conn.execute(
                    "SELECT * FROM users WHERE id = ?", (user_id,)
                ).fetchone()
        except OverflowError:
            return None

        if not row:
            return None

        return self._row_to_user(row)

    def find_by_email(self, email: str) -> Optional[User]:
        """Get user by normalized email."""
        with self._lock:
            row = self._conn.execute(
                "SELECT * FROM users WHERE email = ?", (email,)
            ).fetchone()

        if not row:
            return None

        return self._row_to_user(row)

    def list_all(self) -> List[User]:
        """List all users."""
        with self._lock:
            rows = self._conn.execute(
                "SELECT * FROM users ORDER BY created_at DESC, id DESC"
            ).fetchall()

        return [self._row_to_user(row) for row in rows]

    def delete(self, user_id: int) -> bool:
        """Delete a user, returning whether a row was removed."""
        try:
            with self._lock, self._conn:
                cursor = self._conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
        except OverflowError:
            return False
        return cursor.rowcount > 0

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def _row_to_user(self, row: sqlite3.Row) -> User:
        """Convert database row to User entity."""
        return User(
            id=row["id"],
            email=row["email"],
            firstname=row["firstname"],
            lastname=row["lastname"],
            password_hash=row["password_hash"],
            date_of_birth=date.fromisoformat(row["date_of_birth"]),
            gender=Gender(row["gender"]),
            is_verified=bool(row["is_verified"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
