"""Composition root: backend clients -> repositories -> view models."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from naulify.adapters.firestore_rest import FirestoreRestClient
from naulify.adapters.identity_rest import IdentityRestClient
from naulify.adapters.memory_backend import InMemoryDocumentStore, InMemoryIdentity
from naulify.domain.ports import DocumentStorePort, IdentityPort
from naulify.repositories import (
    DocumentProfileRepository,
    DocumentRouteRepository,
    IdentityAuthRepository,
)
from naulify.viewmodels import AuthVM, ProfileVM, RouteVM

from .config import AppConfig

log = logging.getLogger(__name__)


@dataclass
class AppContainer:
    config: AppConfig
    identity: IdentityPort
    store: DocumentStorePort
    auth_repository: IdentityAuthRepository
    profile_repository: DocumentProfileRepository
    route_repository: DocumentRouteRepository
    auth_vm: AuthVM
    profile_vm: ProfileVM
    route_vm: RouteVM

    def start(self) -> "asyncio.Task[None]":
        """Resolve the initial auth state; call once from a running loop."""
        return self.auth_vm.check_auth_state()

    def close(self) -> None:
        """Cancel in-flight work of every view model."""
        for vm in (self.auth_vm, self.profile_vm, self.route_vm):
            vm.close()


def build_backends(config: AppConfig) -> tuple[IdentityPort, DocumentStorePort]:
    if config.offline:
        log.info("Using in-memory backends (offline mode)")
        return InMemoryIdentity(), InMemoryDocumentStore()
    if not config.is_online_ready():
        raise ValueError("api_key and project_id are required unless offline mode is enabled")
    identity = IdentityRestClient(
        config.api_key,
        base_url=config.auth_base_url,
        request_timeout_s=config.request_timeout_s,
    )
    store = FirestoreRestClient(
        config.project_id,
        base_url=config.firestore_base_url,
        token_provider=identity.id_token,
        api_key=config.api_key,
        request_timeout_s=config.request_timeout_s,
    )
    return identity, store


def build_container(
    config: AppConfig,
    *,
    identity: IdentityPort | None = None,
    store: DocumentStorePort | None = None,
) -> AppContainer:
    """Wire the app; ``identity``/``store`` replace the configured backends."""
    if identity is None or store is None:
        default_identity, default_store = build_backends(config)
        identity = identity or default_identity
        store = store or default_store

    auth_repository = IdentityAuthRepository(identity)
    profile_repository = DocumentProfileRepository(store)
    route_repository = DocumentRouteRepository(store)
    return AppContainer(
        config=config,
        identity=identity,
        store=store,
        auth_repository=auth_repository,
        profile_repository=profile_repository,
        route_repository=route_repository,
        auth_vm=AuthVM(auth_repository),
        profile_vm=ProfileVM(profile_repository),
        route_vm=RouteVM(route_repository),
    )


__all__ = ["AppContainer", "build_backends", "build_container"]
