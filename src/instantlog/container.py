from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .api.client import ApiClient
from .database.connection import DBConfig, DatabaseConnection
from .history.provider import ApiHistoryProvider, HistoryProvider
from .history.service import HistoryService, HistoryViewRegistry
from .leave.service import LeaveService
from .notes.service import CalendarNotesService
from .reports.service import ReportService
from .session.registered_users import AuthService, RegisteredUserRepository, RegisteredUserService
from .session.state import AppStateStore
from .storage.mysql_kv_store import MySQLKeyValueStore
from .storage.repository import KeyValueStore


@dataclass(frozen=True)
class Container:
    api_client: ApiClient
    store: KeyValueStore

    history_provider: HistoryProvider
    history_service: HistoryService
    history_views: HistoryViewRegistry
    report_service: ReportService
    notes_service: CalendarNotesService
    app_state: AppStateStore
    registered_users: RegisteredUserService
    auth_service: AuthService
    leave_service: LeaveService


def wire(*, api_client: ApiClient, store: KeyValueStore, history_provider: HistoryProvider | None = None) -> Container:
    provider = history_provider or ApiHistoryProvider(api_client)
    history_service = HistoryService(provider)
    registered_users = RegisteredUserService(RegisteredUserRepository(store))

    return Container(
        api_client=api_client,
        store=store,
        history_provider=provider,
        history_service=history_service,
        history_views=HistoryViewRegistry(history_service),
        report_service=ReportService(),
        notes_service=CalendarNotesService(store),
        app_state=AppStateStore(store),
        registered_users=registered_users,
        auth_service=AuthService(api_client, registered_users),
        leave_service=LeaveService(api_client),
    )


def build_container(*, api_base_url: str, api_timeout: float, db_config: Mapping[str, Any]) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    return wire(
        api_client=ApiClient(api_base_url, timeout=api_timeout),
        store=MySQLKeyValueStore(conn),
    )
