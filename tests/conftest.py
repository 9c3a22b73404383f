"""
In-memory stand-ins for the motor database, the redis client and the
execution service, shared by every test module.
"""

import base64
import itertools
from types import SimpleNamespace

import httpx
import pytest
from pymongo.errors import DuplicateKeyError, PyMongoError
from redis.exceptions import ConnectionError as RedisConnectionError

from onecode.core.cache import CacheStore
from onecode.exercises.compiler import ExecutionClient
from onecode.exercises.evaluator import SubmissionEvaluator
from onecode.exercises.records import CompletionRecordManager
from onecode.exercises.service import ExerciseService
from onecode.progress.tracker import ProgressTracker

UNIQUE_KEYS = {
    "exercises": [("id",)],
    "tracks": [("id",)],
    "users": [("user_id",)],
    "user_ranks": [("user_id",)],
    "user_tracks": [("user_id", "track_id")],
    "user_exercises": [("user_id", "exercise_id")],
}

_ids = itertools.count(1)


def _matches(doc, flt):
    return all(doc.get(k) == v for k, v in (flt or {}).items())


def _project(doc, projection):
    if not projection:
        return dict(doc)
    included = [k for k, v in projection.items() if v]
    if included:
        out = {k: doc[k] for k in included if k in doc}
        if projection.get("_id", 1) and "_id" in doc:
            out["_id"] = doc["_id"]
        return out
    return {k: v for k, v in doc.items() if projection.get(k, 1)}


class FakeCursor:
    def __init__(self, docs):
        self._docs = docs

    def limit(self, n):
        return FakeCursor(self._docs[:n])

    async def to_list(self, length=None):
        return list(self._docs if length is None else self._docs[:length])


class FakeCollection:
    def __init__(self, name):
        self.name = name
        self.docs = []
        self.unique = UNIQUE_KEYS.get(name, [])
        self.fail_with = None
        self.calls = []

    def _check(self, op):
        self.calls.append(op)
        if self.fail_with is not None:
            raise self.fail_with

    async def find_one(self, flt=None, projection=None):
        self._check("find_one")
        for doc in self.docs:
            if _matches(doc, flt):
                return _project(doc, projection)
        return None

    def find(self, flt=None, projection=None):
        self._check("find")
        return FakeCursor([_project(d, projection) for d in self.docs if _matches(d, flt)])

    async def insert_one(self, doc):
        self._check("insert_one")
        for fields in self.unique:
            key = tuple(doc.get(f) for f in fields)
            if any(tuple(d.get(f) for f in fields) == key for d in self.docs):
                raise DuplicateKeyError("E11000 duplicate key error", code=11000)
        stored = dict(doc, _id=next(_ids))
        self.docs.append(stored)
        return SimpleNamespace(inserted_id=stored["_id"])

    async def update_one(self, flt, update):
        self._check("update_one")
        for doc in self.docs:
            if _matches(doc, flt):
                doc.update(update.get("$set", {}))
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def count_documents(self, flt):
        self._check("count_documents")
        return sum(1 for d in self.docs if _matches(d, flt))

    async def create_index(self, *args, **kwargs):
        return "index"


class FakeDatabase:
    def __init__(self):
        self._collections = {}

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        if name not in self._collections:
            self._collections[name] = FakeCollection(name)
        return self._collections[name]

    def __getitem__(self, name):
        return getattr(self, name)


class FakeRedis:
    def __init__(self):
        self.store = {}
        self.ttls = {}
        self.fail = False
        self.gets = 0

    def _check(self):
        if self.fail:
            raise RedisConnectionError("redis down")

    async def get(self, key):
        self._check()
        self.gets += 1
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self._check()
        self.store[key] = value
        if ex is not None:
            self.ttls[key] = ex
        return True

    async def expire(self, key, seconds):
        self._check()
        self.ttls[key] = seconds
        return key in self.store

    async def delete(self, *keys):
        self._check()
        removed = 0
        for key in keys:
            removed += int(self.store.pop(key, None) is not None)
            self.ttls.pop(key, None)
        return removed

    async def aclose(self):
        return None


class FakeCompiler:
    """Scripted execution service behind httpx.MockTransport"""

    def __init__(self):
        self.output = ""
        self.error = None
        self.status_code = 200
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"message": "rejected"})
        return httpx.Response(200, json={"data": {"output": self.output, "error": self.error}})

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler), base_url="http://compiler.test")


def b64(text: str) -> str:
    return base64.b64encode(text.encode()).decode()


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def cache(fake_redis):
    return CacheStore(fake_redis)


@pytest.fixture
def fake_compiler():
    return FakeCompiler()


@pytest.fixture
def store_failure():
    return PyMongoError("connection reset")


@pytest.fixture
def exercise(fake_db):
    doc = {
        "id": "ex-1",
        "name": "Sum of list",
        "level": 1,
        "max_points": 10,
        "min_points": 0,
        "instructions": "Return the sum",
        "base_code": b64("def solve(nums):\n    pass\n"),
        "tests": b64("print(run_tests())"),
        "language": "Python",
        "track_id": "track-py",
    }
    fake_db.exercises.docs.append(dict(doc))
    return doc


@pytest.fixture
def exercise_service(fake_db, cache):
    return ExerciseService(fake_db, cache)


@pytest.fixture
def records(fake_db):
    return CompletionRecordManager(fake_db)


@pytest.fixture
def evaluator(exercise_service, records, fake_compiler, cache):
    return SubmissionEvaluator(exercise_service, records, ExecutionClient(fake_compiler.client()), cache)


@pytest.fixture
def tracker_factory(fake_db, cache):
    def build(today):
        return ProgressTracker(fake_db, cache, today=lambda: today)
    return build
