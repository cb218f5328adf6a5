# bhreads/conftest.py
"""
pytest 공용 픽스처

실제 Firestore 대신 create_app(db=...)에 주입하는 인메모리 대역(FakeFirestore)을 사용합니다.
서비스가 사용하는 API(document/get/set/update/delete, where/order_by/offset/limit/stream, count, transaction)만 구현합니다.
"""
import copy
import uuid

import pytest
from google.api_core.exceptions import NotFound

from bhreads import create_app

_OPERATORS = {
    '==': lambda a, b: a == b,
    '!=': lambda a, b: a != b,
    '<': lambda a, b: a is not None and a < b,
    '<=': lambda a, b: a is not None and a <= b,
    '>': lambda a, b: a is not None and a > b,
    '>=': lambda a, b: a is not None and a >= b,
    'in': lambda a, b: a in b,
    'array_contains': lambda a, b: isinstance(a, list) and b in a,
}


class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocumentRef:
    def __init__(self, store, doc_id):
        self._store = store
        self.id = doc_id

    def get(self, transaction=None):
        return FakeSnapshot(self, self._store.get(self.id))

    def set(self, data, merge=False):
        if merge and self.id in self._store:
            self._store[self.id].update(copy.deepcopy(data))
        else:
            self._store[self.id] = copy.deepcopy(data)

    def update(self, data):
        if self.id not in self._store:
            raise NotFound(f"No document to update: {self.id}")
        self._store[self.id].update(copy.deepcopy(data))

    def delete(self):
        self._store.pop(self.id, None)


class _AggregateResult:
    def __init__(self, value):
        self.value = value


class _CountQuery:
    def __init__(self, query):
        self._query = query

    def get(self):
        return [[_AggregateResult(sum(1 for _ in self._query.stream()))]]


class FakeQuery:
    def __init__(self, store, filters=(), order=None, offset=0, limit=None):
        self._store = store
        self._filters = list(filters)
        self._order = order
        self._offset = offset
        self._limit = limit

    def _copy(self, **changes):
        params = dict(filters=self._filters, order=self._order, offset=self._offset, limit=self._limit)
        params.update(changes)
        return FakeQuery(self._store, **params)

    def where(self, field, op, value):
        return self._copy(filters=self._filters + [(field, _OPERATORS[op], value)])

    def order_by(self, field, direction='ASCENDING'):
        return self._copy(order=(field, direction))

    def offset(self, count):
        return self._copy(offset=count)

    def limit(self, count):
        return self._copy(limit=count)

    def count(self):
        return _CountQuery(self)

    def stream(self):
        items = [
            (doc_id, data) for doc_id, data in self._store.items()
            if all(op(data.get(field), value) for field, op, value in self._filters)
        ]
        if self._order:
            field, direction = self._order
            items.sort(key=lambda item: item[1].get(field), reverse=direction == 'DESCENDING')
        items = items[self._offset:]
        if self._limit is not None:
            items = items[:self._limit]
        for doc_id, data in items:
            yield FakeSnapshot(FakeDocumentRef(self._store, doc_id), data)

    def get(self):
        return list(self.stream())


class FakeCollection(FakeQuery):
    def document(self, doc_id=None):
        return FakeDocumentRef(self._store, doc_id or uuid.uuid4().hex)


class FakeTransaction:
    """
    firestore.transactional 이 호출하는 인터페이스만 흉내 내는 트랜잭션.
    쓰기는 모아 두었다가 커밋 시점에 반영하고, 롤백 시 버립니다.
    """
    _read_only = False
    _max_attempts = 1

    def __init__(self):
        self._id = None
        self._writes = []

    def _clean_up(self):
        self._writes = []
        self._id = None

    def _begin(self, retry_id=None):
        self._id = uuid.uuid4().hex.encode()

    def _commit(self):
        writes, self._writes = self._writes, []
        for write in writes:
            write()
        self._id = None
        return []

    def _rollback(self):
        self._clean_up()

    def set(self, reference, data, merge=False):
        self._writes.append(lambda: reference.set(data, merge=merge))

    def update(self, reference, data):
        self._writes.append(lambda: reference.update(data))

    def delete(self, reference):
        self._writes.append(reference.delete)


class FakeFirestore:
    def __init__(self):
        self._collections = {}

    def collection(self, name):
        return FakeCollection(self._collections.setdefault(name, {}))

    def transaction(self):
        return FakeTransaction()


@pytest.fixture
def db():
    return FakeFirestore()


@pytest.fixture
def app(db):
    app = create_app('testing', db=db)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register(client):
    """사용자를 가입시키고 (user, token)을 반환하는 헬퍼."""
    def _register(username="baker1", email=None, password="secret1"):
        email = email or f"{username}@x.com"
        response = client.post('/api/auth/register', json={
            "username": username, "email": email, "password": password
        })
        assert response.status_code == 200, response.get_json()
        body = response.get_json()
        return body["user"], body["token"]
    return _register


@pytest.fixture
def auth_header():
    def _auth_header(token):
        return {"Authorization": f"Bearer {token}"}
    return _auth_header


@pytest.fixture
def make_post(client, auth_header):
    def _make_post(token, title="My first loaf", content="Sourdough success!", **extra):
        response = client.post('/api/posts', json={"title": title, "content": content, **extra},
                               headers=auth_header(token))
        assert response.status_code == 201, response.get_json()
        return response.get_json()["post"]
    return _make_post
