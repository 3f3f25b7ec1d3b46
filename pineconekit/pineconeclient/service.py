from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx
from opentelemetry import trace

from ..errors import (
    ConfigurationError,
    CreationDataMissing,
    CreationFailed,
    MissingIdentifier,
    PollCancelled,
    ResourceNotFound,
    RetryExhausted,
)
from ..eventemitter import EventEmitter, EventFilter, Listener
from ..httpclient import HttpClient, HttpClientSettings
from ..indexpoller import IndexReadinessPoller, PollPolicy
from .api import PineconeApi
from .config import PineconeSettings
from .contracts import ClientEventType, CreateIndexRequest, Metric
from .ports import IndexOperationPort, VectorOperationPort
from .vectors import VectorOperation

log = logging.getLogger("pineconekit.client")
tracer = trace.get_tracer("pineconekit")


@contextmanager
def _span(name: str, **attrs):
    with tracer.start_as_current_span(name) as span:
        for k, v in attrs.items():
            if v is not None:
                span.set_attribute(f"pinecone.{k}", v)
        yield span


def _host_from_description(desc: Any) -> Optional[str]:
    status = desc.get("status") if isinstance(desc, dict) else None
    host = status.get("host") if isinstance(status, dict) else None
    if not host:
        return None
    return host if host.startswith("http") else f"https://{host}"


class PineconeClient:
    """
    Facade over the Pinecone control and data planes.

    Orchestrates the index lifecycle (exists -> create -> wait for READY),
    hands out per-index VectorOperation handles and publishes lifecycle events
    (ClientEventType) through its EventEmitter.
    """

    def __init__(
        self,
        settings: Optional[PineconeSettings] = None,
        *,
        emitter: Optional[EventEmitter] = None,
        poll_policy: Optional[PollPolicy] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ) -> None:
        self.settings = settings or PineconeSettings()
        self.events: EventEmitter = emitter or EventEmitter(ClientEventType)
        self.poll_policy = poll_policy or self.settings.poll_policy()
        self.index_names: List[str] = []
        self._transport = transport
        self._sleep = sleep
        self._project: Optional[str] = self.settings.PINECONE_PROJECT
        self._http: Optional[HttpClient] = None
        self._api: Optional[IndexOperationPort] = None
        self._indices: Dict[str, VectorOperation] = {}
        self._hosts: Dict[str, str] = {}

    # ---------- Lifecycle ----------

    @property
    def api(self) -> IndexOperationPort:
        if self._api is None:
            raise ConfigurationError("Client is not initialized; call initialize() first")
        return self._api

    @property
    def project(self) -> Optional[str]:
        return self._project

    async def initialize(self) -> None:
        s = self.settings
        if not s.PINECONE_KEY:
            raise ConfigurationError("API key must be specified (PINECONE_KEY)")
        if not (s.PINECONE_ENV or s.PINECONE_CONTROLLER_URL):
            raise ConfigurationError("Environment must be specified (PINECONE_ENV)")

        if self._api is None:
            self._http = HttpClient(
                HttpClientSettings(
                    base_url=s.controller_url(),
                    timeout=s.PINECONE_TIMEOUT_SECONDS,
                    headers=s.auth_headers(),
                ),
                transport=self._transport,
            )
            self._api = PineconeApi(self._http)

        try:
            if not self._project:
                who = await self._api.whoami()
                self._project = (who or {}).get("project_name")
            await self.refresh_index_list()
        except Exception as e:
            log.exception("client.init err controller=%s", s.controller_url())
            self.events.emit(ClientEventType.INIT_RESULT, {"ok": False, "error": str(e)})
            raise

        log.info("client.init ok project=%s indexes=%d", self._project, len(self.index_names))
        self.events.emit(
            ClientEventType.INIT_RESULT,
            {"ok": True, "project": self._project, "indexes": len(self.index_names)},
        )

    async def close(self) -> None:
        for op in self._indices.values():
            await op.http.aclose()
        self._indices.clear()
        if self._http is not None:
            await self._http.aclose()
            self._http = None
        self._api = None

    async def __aenter__(self) -> "PineconeClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # ---------- Events ----------

    def on(self, event_type: ClientEventType, listener: Listener) -> None:
        self.events.on(event_type, listener)

    def off(self, event_type: ClientEventType, listener: Listener) -> None:
        self.events.off(event_type, listener)

    def add_event_filter(self, event_type: ClientEventType, flt: EventFilter) -> None:
        self.events.add_event_filter(event_type, flt)

    def mute(self, event_type: ClientEventType) -> None:
        self.events.mute(event_type)

    def unmute(self, event_type: ClientEventType) -> None:
        self.events.unmute(event_type)

    # ---------- Indexes ----------

    async def refresh_index_list(self) -> List[str]:
        self.index_names = await self.api.list_indexes()
        log.debug("client.indexes %s", self.index_names)
        return self.index_names

    async def list_indexes(self) -> List[str]:
        return await self.api.list_indexes()

    async def describe_index(self, name: str) -> Dict[str, Any]:
        if not name:
            raise MissingIdentifier()
        desc = await self.api.describe_index(name)
        host = _host_from_description(desc)
        if host:
            self._hosts[name] = host
        return desc

    async def index_exists(self, name: str) -> bool:
        try:
            await self.describe_index(name)
            return True
        except Exception as e:
            if getattr(e, "not_found", False):
                return False
            raise

    async def create_index(
        self,
        name: str,
        dimension: Optional[int] = None,
        metric: Optional[Metric] = None,
        *,
        wait: bool = True,
        cancel: Optional[asyncio.Event] = None,
        **options: Any,
    ) -> None:
        if not name:
            raise MissingIdentifier()
        if dimension is None:
            dimension = self.settings.PINECONE_DEF_DIM
        if dimension is None:
            raise CreationDataMissing(name, "dimension")

        req = CreateIndexRequest(
            name=name,
            dimension=dimension,
            metric=metric or Metric(self.settings.PINECONE_DEF_METRIC),
            **options,
        )
        with _span("pinecone.create_index", index=name, dimension=dimension, metric=req.metric.value):
            await self.api.create_index(req)
            self.events.emit(
                ClientEventType.INDEX_CREATING,
                {"index": name, "dimension": dimension, "metric": req.metric.value},
            )
            if wait:
                await self.wait_until_ready(name, cancel=cancel)

    async def wait_until_ready(self, name: str, *, cancel: Optional[asyncio.Event] = None) -> None:
        poller = IndexReadinessPoller(self.api.describe_index, self.poll_policy, sleep=self._sleep)
        try:
            await poller.wait_until_ready(name, cancel=cancel)
        except (CreationFailed, RetryExhausted, PollCancelled) as e:
            self.events.emit(
                ClientEventType.INDEX_FAILED,
                {"index": name, "code": e.code.value, "error": e.message},
            )
            raise

        if name not in self.index_names:
            self.index_names.append(name)
        self.events.emit(ClientEventType.INDEX_READY, {"index": name})

    async def use_index(
        self,
        name: str,
        create_if_not_exists: bool = False,
        dimension: Optional[int] = None,
        metric: Optional[Metric] = None,
    ) -> VectorOperationPort:
        if not name:
            raise MissingIdentifier()

        with _span("pinecone.use_index", index=name, create=create_if_not_exists):
            exists = await self.index_exists(name)
            if not exists:
                if not create_if_not_exists:
                    raise ResourceNotFound(name)
                await self.create_index(name, dimension, metric)
                await self.describe_index(name)
            return self.get_index(name)

    def get_index(self, name: str) -> VectorOperationPort:
        if not name:
            raise MissingIdentifier()
        op = self._indices.get(name)
        if op is not None:
            return op

        host = self._hosts.get(name)
        if host is None:
            if not self._project:
                raise ConfigurationError(
                    f'No host known for index "{name}"; describe it first or set PINECONE_PROJECT',
                    index_name=name,
                )
            host = self.settings.index_url(name, self._project)

        http = HttpClient(
            HttpClientSettings(
                base_url=host,
                timeout=self.settings.PINECONE_TIMEOUT_SECONDS,
                headers=self.settings.auth_headers(),
            ),
            transport=self._transport,
        )
        op = VectorOperation(http, name)
        self._indices[name] = op
        return op

    async def configure_index(
        self, name: str, replicas: Optional[int] = None, pod_type: Optional[str] = None
    ) -> Any:
        if not name:
            raise MissingIdentifier()
        return await self.api.configure_index(name, replicas=replicas, pod_type=pod_type)

    async def delete_index(self, name: str) -> None:
        if not name:
            raise MissingIdentifier()
        await self.api.delete_index(name)
        op = self._indices.pop(name, None)
        if op is not None:
            await op.http.aclose()
        self._hosts.pop(name, None)
        if name in self.index_names:
            self.index_names.remove(name)
        log.info("client.delete_index name=%s", name)
        self.events.emit(ClientEventType.INDEX_DELETED, {"index": name})

    # ---------- Collections ----------

    async def create_collection(self, name: str, source: str) -> Any:
        return await self.api.create_collection(name, source)

    async def describe_collection(self, name: str) -> Dict[str, Any]:
        return await self.api.describe_collection(name)

    async def delete_collection(self, name: str) -> Any:
        return await self.api.delete_collection(name)

    async def list_collections(self) -> List[str]:
        return await self.api.list_collections()
