"""Shared test fixtures for panelforge tests."""
from pathlib import Path

import pytest

from panelforge.services.docker_compose import ComposeAnalyzer, ComposeLoader


@pytest.fixture
def write_compose(tmp_path):
    """Write compose text to a file and return its path as a string."""
    def _write(text: str, name: str = "docker-compose.yml") -> str:
        path = tmp_path / name
        path.write_text(text)
        return str(path)
    return _write


@pytest.fixture
def analyze():
    """Parse compose text and classify its services."""
    def _analyze(text: str):
        document = ComposeLoader().parse(text)
        return ComposeAnalyzer().analyze(document)
    return _analyze


@pytest.fixture
def templates_dir(tmp_path) -> Path:
    """Empty templates directory."""
    path = tmp_path / "templates"
    path.mkdir()
    return path


# Common compose documents
WEB_COMPOSE = """
services:
  web:
    image: nginx:alpine
    ports:
      - "80:80"
    volumes:
      - ./nginx.conf:/etc/nginx/nginx.conf
"""

POSTGRES_API_COMPOSE = """
version: '3.8'
services:
  db:
    image: postgres:15
    environment:
      POSTGRES_USER: app
      POSTGRES_PASSWORD: secret
    volumes:
      - pgdata:/var/lib/postgresql/data
  api:
    image: example/api:1.0
    environment:
      - DATABASE_URL=postgres://app:secret@db:5432/app
      - PORT=3000
    ports:
      - "3000:3000"
    depends_on:
      - db
  worker:
    command: ["python", "worker.py"]

volumes:
  pgdata:
"""


# Unquoted scalars that YAML 1.1 would retype
GIT_COMPOSE = """
services:
  git:
    image: gitea/gitea:1.21
    ports:
      - 2222:22
      - 3000:3000
    environment:
      FEATURE: yes
      SSH_ENABLED: on
      MODE: 0755
      DEBUG: false
"""

@pytest.fixture
def web_compose():
    return WEB_COMPOSE


@pytest.fixture
def postgres_api_compose():
    return POSTGRES_API_COMPOSE


@pytest.fixture
def git_compose():
    return GIT_COMPOSE
