# ============================================================================
# SHARED TEST FIXTURES
# ============================================================================
# STATUS: Tests - Fixtures shared by all test modules
# PURPOSE: Entity source trees on disk and configuration isolation
# LAST_REVIEWED: 19 OCT 2026
# ============================================================================
"""
Shared fixtures.

entities_dir writes a small blog domain to tmp_path:

    entities/
        accounts.py       User (+ AuditedUser, inherits the marker)
        blog/posts.py     Post (ManyToOne User, owning ManyToMany Tag)
        blog/tags.py      Tag (inverse ManyToMany)
        markers.py        Marker (table marker, no columns)
        helpers.py        plain helpers, no entities
        broken.py         raises on import
        notes.txt         ignored (wrong suffix)
"""

import os
import textwrap
from pathlib import Path
from typing import Dict

import pytest

from ormforge.config import reset_defaults


ACCOUNTS = """
    from typing import Annotated, ClassVar, Optional

    from pydantic import BaseModel, Field

    from ormforge.mapping import ColumnMeta


    class User(BaseModel):
        __sql_table__: ClassVar[str] = "users"

        id: Annotated[int, ColumnMeta(primary_key=True, auto_increment=True)]
        email: Annotated[str, Field(max_length=120), ColumnMeta(unique=True)]
        nickname: Annotated[Optional[str], ColumnMeta(length=50)] = None
        active: Annotated[bool, ColumnMeta()] = True


    class AuditedUser(User):
        pass
"""

POSTS = """
    from enum import Enum
    from typing import Annotated, Any, ClassVar, List

    from pydantic import BaseModel

    from ormforge.mapping import ColumnMeta, JoinColumn, ManyToMany, ManyToOne


    class Status(str, Enum):
        DRAFT = "draft"
        PUBLISHED = "published"


    class Post(BaseModel):
        __sql_table__: ClassVar[str] = "posts"

        id: Annotated[int, ColumnMeta(primary_key=True, auto_increment=True)]
        title: Annotated[str, ColumnMeta(length=200)]
        status: Annotated[Status, ColumnMeta()] = Status.DRAFT
        author: Annotated[Any, ManyToOne("User"), JoinColumn(on_delete="CASCADE")] = None
        tags: Annotated[List[Any], ManyToMany("Tag", inversed_by="posts")] = []
"""

TAGS = """
    from typing import Annotated, Any, ClassVar, List

    from pydantic import BaseModel

    from ormforge.mapping import ColumnMeta, ManyToMany


    class Tag(BaseModel):
        __sql_table__: ClassVar[str] = "tags"

        id: Annotated[int, ColumnMeta(primary_key=True, auto_increment=True)]
        name: Annotated[str, ColumnMeta(length=50, unique=True)]
        posts: Annotated[List[Any], ManyToMany("Post", mapped_by="tags")] = []
"""

MARKERS = """
    from typing import ClassVar

    from pydantic import BaseModel


    class Marker(BaseModel):
        __sql_table__: ClassVar[str] = "markers"

        label: str = ""
"""

HELPERS = """
    def slugify(text):
        return text.lower().replace(" ", "-")


    class Helper:
        pass
"""

BROKEN = """
    raise RuntimeError("entity module failed to import")
"""

BLOG_ENTITIES: Dict[str, str] = {
    "accounts.py": ACCOUNTS,
    "blog/posts.py": POSTS,
    "blog/tags.py": TAGS,
    "markers.py": MARKERS,
    "helpers.py": HELPERS,
    "broken.py": BROKEN,
    "notes.txt": "not python",
}


def write_entities(root: Path, files: Dict[str, str]) -> Path:
    """Write relative path -> source into root and return root."""
    for relative, source in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source).lstrip(), encoding="utf-8")
    return root


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Drop ORMFORGE_* variables and cached defaults around every test."""
    for key in list(os.environ):
        if key.startswith("ORMFORGE_") or key == "LOG_FORMAT":
            monkeypatch.delenv(key, raising=False)
    reset_defaults()
    yield
    reset_defaults()


@pytest.fixture
def entities_dir(tmp_path) -> Path:
    """Blog domain including a broken file."""
    return write_entities(tmp_path / "entities", BLOG_ENTITIES)


@pytest.fixture
def clean_entities_dir(tmp_path) -> Path:
    """Blog domain without the broken file."""
    files = {k: v for k, v in BLOG_ENTITIES.items() if k != "broken.py"}
    return write_entities(tmp_path / "clean_entities", files)


@pytest.fixture
def make_entities(tmp_path):
    """Factory writing an arbitrary entity tree under tmp_path."""
    def _make(files: Dict[str, str], name: str = "custom") -> Path:
        return write_entities(tmp_path / name, files)
    return _make
