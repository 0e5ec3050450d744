import os

import pytest
from pymongo.errors import OperationFailure

from mongo_init.settings import load_settings


class FakeDatabase:
    def __init__(self, client, name):
        self.client = client
        self.name = name

    def command(self, command, *args, **kwargs):
        self.client.calls.append((self.name, command, args, kwargs))
        handler = self.client.handlers.get(command)
        if handler is None:
            return {'ok': 1}
        if callable(handler):
            return handler(self.name, *args, **kwargs)
        if isinstance(handler, Exception):
            raise handler
        return handler


class FakeClient:
    """Records every command sent through client[db].command(...)."""

    def __init__(self):
        self.calls = []
        self.handlers = {}
        self.closed = False

    def __getitem__(self, name):
        return FakeDatabase(self, name)

    @property
    def admin(self):
        return self['admin']

    def close(self):
        self.closed = True

    def commands(self, name):
        return [c for c in self.calls if c[1] == name]

    def created_users(self):
        return {args[0]: (db, kwargs['roles']) for db, _, args, kwargs in self.commands('createUser')}


@pytest.fixture
def client():
    return FakeClient()


@pytest.fixture
def clean_env(monkeypatch):
    for name in list(os.environ):
        if name.startswith('MONGO_'):
            monkeypatch.delenv(name)
    return monkeypatch


@pytest.fixture
def settings(clean_env, tmp_path):
    return load_settings(config_file=tmp_path / 'missing.yml')


@pytest.fixture
def no_sleep():
    sleeps = []
    return sleeps, sleeps.append


def already_initialized():
    return OperationFailure('already initialized', code=23)


def user_exists(name='appuser'):
    return OperationFailure(f'User "{name}@myapp" already exists', code=51003)
