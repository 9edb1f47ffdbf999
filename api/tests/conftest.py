"""Common pytest fixtures for API tests.

Tests run against a shared in-memory SQLite database; DATABASE_URL is set
before the app is imported so the engine binds to it.
"""

import os
from collections.abc import Iterator
from dataclasses import dataclass
from uuid import UUID

os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete
from sqlmodel import Session, SQLModel

from lingohub_api.db import engine
from lingohub_api.main import app
from lingohub_models import (
    I18nKey,
    I18nLanguage,
    I18nTranslation,
    User,
    Workspace,
    WorkspaceMember,
)


@dataclass
class Tenant:
    workspace_id: UUID
    owner: User
    admin: User
    member: User
    outsider: User

    def headers(self, user: User, workspace: bool = True) -> dict:
        headers = {"Authorization": f"Bearer {user.api_token}"}
        if workspace:
            headers["X-Workspace-Id"] = str(self.workspace_id)
        return headers


@pytest.fixture(scope="session")
def client() -> Iterator[TestClient]:
    SQLModel.metadata.create_all(engine)
    with TestClient(app) as c:
        yield c


@pytest.fixture(autouse=True)
def _clean_db(client) -> Iterator[None]:
    # Respect FKs: translations first, users last
    with Session(engine) as session:
        for model in (I18nTranslation, I18nKey, I18nLanguage, WorkspaceMember, Workspace, User):
            session.exec(delete(model))
        session.commit()
    # The client is shared; drop ws/locale cookies set by earlier tests
    client.cookies.clear()
    yield


@pytest.fixture()
def tenant() -> Tenant:
    with Session(engine) as session:
        users = {name: User(email=f"{name}@example.com", api_token=f"token-{name}") for name in
                 ("owner", "admin", "member", "outsider")}
        session.add_all(users.values())
        session.flush()
        workspace = Workspace(name="Acme", owner_id=users["owner"].id)
        session.add(workspace)
        session.flush()
        workspace_id = workspace.id
        session.add(WorkspaceMember(workspace_id=workspace.id, user_id=users["admin"].id, role="admin"))
        session.add(WorkspaceMember(workspace_id=workspace.id, user_id=users["member"].id, role="member"))
        session.commit()
        for user in users.values():
            session.refresh(user)
        session.expunge_all()
        return Tenant(workspace_id=workspace_id, **users)
