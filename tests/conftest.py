from __future__ import annotations

from collections import defaultdict
from typing import Any, Dict, List, Optional

import httpx
import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from pineconekit.pineconeclient import PineconeClient, PineconeSettings

API_KEY = "test-key"
PROJECT = "proj1"
ENVIRONMENT = "test-env"


class FakePinecone:
    """
    In-process stand-in for the Pinecone controller + index endpoints.
    describe() walks through `states[name]` one entry per call, then sticks
    on the last state.
    """

    def __init__(self) -> None:
        self.indexes: Dict[str, Dict[str, Any]] = {}
        self.states: Dict[str, List[str]] = {}
        self.collections: Dict[str, Dict[str, Any]] = {}
        self.vectors: Dict[str, Dict[str, Dict[str, Any]]] = defaultdict(dict)
        self.describe_calls: Dict[str, int] = defaultdict(int)
        self.fail_describe_with: Optional[int] = None
        self.app = self._build_app()

    # -------- helpers --------

    def add_index(self, name: str, dimension: int = 3, state: str = "Ready") -> None:
        self.indexes[name] = {
            "database": {"name": name, "dimension": dimension, "metric": "cosine", "replicas": 1},
            "status": {"ready": state == "Ready", "state": state, "host": f"{name}-{PROJECT}.svc.{ENVIRONMENT}.pinecone.io"},
        }

    def script(self, name: str, *states: str) -> None:
        self.states[name] = list(states)

    # -------- app --------

    def _build_app(self) -> FastAPI:
        app = FastAPI()
        fake = self

        @app.middleware("http")
        async def require_api_key(request: Request, call_next):
            if request.headers.get("api-key") != API_KEY:
                return PlainTextResponse("unauthorized", status_code=401)
            return await call_next(request)

        @app.get("/actions/whoami")
        async def whoami():
            return {"project_name": PROJECT, "user_label": "default", "user_name": "tester"}

        @app.get("/databases")
        async def list_databases():
            return list(fake.indexes)

        @app.post("/databases")
        async def create_database(request: Request):
            body = await request.json()
            name = body["name"]
            if name in fake.indexes:
                return PlainTextResponse("index exists", status_code=409)
            fake.add_index(name, body["dimension"], state="Initializing")
            fake.indexes[name]["database"].update(body)
            return PlainTextResponse("index created", status_code=201)

        @app.get("/databases/{name}")
        async def describe_database(name: str):
            fake.describe_calls[name] += 1
            if fake.fail_describe_with is not None:
                return PlainTextResponse("boom", status_code=fake.fail_describe_with)
            if name not in fake.indexes:
                return PlainTextResponse("not found", status_code=404)
            queue = fake.states.get(name)
            if queue:
                state = queue.pop(0) if len(queue) > 1 else queue[0]
                fake.indexes[name]["status"].update({"state": state, "ready": state == "Ready"})
            return fake.indexes[name]

        @app.patch("/databases/{name}")
        async def configure_database(name: str, request: Request):
            if name not in fake.indexes:
                return PlainTextResponse("not found", status_code=404)
            fake.indexes[name]["database"].update(await request.json())
            return PlainTextResponse("", status_code=202)

        @app.delete("/databases/{name}")
        async def delete_database(name: str):
            if fake.indexes.pop(name, None) is None:
                return PlainTextResponse("not found", status_code=404)
            return PlainTextResponse("", status_code=202)

        @app.get("/collections")
        async def list_collections():
            return list(fake.collections)

        @app.post("/collections")
        async def create_collection(request: Request):
            body = await request.json()
            if body["source"] not in fake.indexes:
                return PlainTextResponse("source not found", status_code=404)
            fake.collections[body["name"]] = {"name": body["name"], "status": "Ready", "size": 0}
            return PlainTextResponse("collection created", status_code=201)

        @app.get("/collections/{name}")
        async def describe_collection(name: str):
            if name not in fake.collections:
                return PlainTextResponse("not found", status_code=404)
            return fake.collections[name]

        @app.delete("/collections/{name}")
        async def delete_collection(name: str):
            fake.collections.pop(name, None)
            return PlainTextResponse("", status_code=202)

        # -------- data plane (keyed by Host header) --------

        def _ns(request: Request, namespace: Optional[str]) -> Dict[str, Dict[str, Any]]:
            return fake.vectors[f"{request.url.hostname}/{namespace or ''}"]

        @app.post("/vectors/upsert")
        async def upsert(request: Request):
            body = await request.json()
            ns = _ns(request, body.get("namespace"))
            for v in body["vectors"]:
                ns[v["id"]] = v
            return {"upsertedCount": len(body["vectors"])}

        @app.get("/vectors/fetch")
        async def fetch(request: Request):
            ids = request.query_params.getlist("ids")
            namespace = request.query_params.get("namespace")
            ns = _ns(request, namespace)
            return {"vectors": {i: ns[i] for i in ids if i in ns}, "namespace": namespace or ""}

        @app.post("/vectors/update")
        async def update(request: Request):
            body = await request.json()
            ns = _ns(request, body.get("namespace"))
            if body["id"] in ns:
                rec = ns[body["id"]]
                if "values" in body:
                    rec["values"] = body["values"]
                if "setMetadata" in body:
                    rec.setdefault("metadata", {}).update(body["setMetadata"])
            return {}

        @app.post("/vectors/delete")
        async def delete(request: Request):
            body = await request.json()
            ns = _ns(request, body.get("namespace"))
            if body.get("deleteAll"):
                ns.clear()
            for i in body.get("ids") or []:
                ns.pop(i, None)
            return {}

        @app.post("/query")
        async def query(request: Request):
            body = await request.json()
            ns = _ns(request, body.get("namespace"))
            q = body["vector"]
            scored = []
            for rec in ns.values():
                score = sum(a * b for a, b in zip(q, rec["values"]))
                match = {"id": rec["id"], "score": score}
                if body.get("includeMetadata"):
                    match["metadata"] = rec.get("metadata", {})
                scored.append(match)
            scored.sort(key=lambda m: m["score"], reverse=True)
            return {"matches": scored[: body["topK"]], "namespace": body.get("namespace", "")}

        @app.post("/describe_index_stats")
        async def stats(request: Request):
            host = request.url.hostname
            counts = {
                key.split("/", 1)[1]: {"vectorCount": len(recs)}
                for key, recs in fake.vectors.items()
                if key.startswith(f"{host}/")
            }
            return JSONResponse({"namespaces": counts, "totalVectorCount": sum(c["vectorCount"] for c in counts.values())})

        return app


@pytest.fixture
def fake() -> FakePinecone:
    return FakePinecone()


@pytest.fixture
def settings() -> PineconeSettings:
    return PineconeSettings(
        _env_file=None,
        PINECONE_KEY=API_KEY,
        PINECONE_ENV=ENVIRONMENT,
        PINECONE_PROJECT=None,
        PINECONE_DEF_DIM=3,
        PINECONE_POLL_DELAY_SECONDS=1.0,
        PINECONE_POLL_MAX_ATTEMPTS=10,
    )


class SleepRecorder:
    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def sleeps() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def make_client(fake, settings, sleeps):
    def _make(**overrides) -> PineconeClient:
        s = settings.model_copy(update=overrides) if overrides else settings
        return PineconeClient(s, transport=httpx.ASGITransport(app=fake.app), sleep=sleeps)
    return _make
