"""Application entry point and composition root."""

import logging

import falcon.asgi

from grainguard.application.use_cases.client.add_client import AddClientUseCase
from grainguard.application.use_cases.client.add_securable_item import AddSecurableItemUseCase
from grainguard.application.use_cases.client.delete_client import DeleteClientUseCase
from grainguard.application.use_cases.client.get_clients import GetClientsUseCase
from grainguard.application.use_cases.client.get_securable_item import GetSecurableItemUseCase
from grainguard.application.use_cases.group.add_group import AddGroupUseCase
from grainguard.application.use_cases.group.add_role_to_group import AddRoleToGroupUseCase
from grainguard.application.use_cases.group.add_user_to_group import AddUserToGroupUseCase
from grainguard.application.use_cases.group.delete_group import DeleteGroupUseCase
from grainguard.application.use_cases.group.get_group_roles import GetGroupRolesUseCase
from grainguard.application.use_cases.group.remove_role_from_group import (
    RemoveRoleFromGroupUseCase,
)
from grainguard.application.use_cases.group.remove_user_from_group import (
    RemoveUserFromGroupUseCase,
)
from grainguard.application.use_cases.permission.add_permission import AddPermissionUseCase
from grainguard.application.use_cases.permission.delete_permission import (
    DeletePermissionUseCase,
)
from grainguard.application.use_cases.permission.get_permissions import GetPermissionsUseCase
from grainguard.application.use_cases.role.add_permissions_to_role import (
    AddPermissionsToRoleUseCase,
)
from grainguard.application.use_cases.role.add_role import AddRoleUseCase
from grainguard.application.use_cases.role.delete_role import DeleteRoleUseCase
from grainguard.application.use_cases.role.get_roles import GetRolesUseCase
from grainguard.application.use_cases.role.remove_permissions_from_role import (
    RemovePermissionsFromRoleUseCase,
)
from grainguard.application.use_cases.user.get_effective_permissions import (
    GetEffectivePermissionsUseCase,
)
from grainguard.application.use_cases.user.get_granular_permissions import (
    GetGranularPermissionsUseCase,
)
from grainguard.application.use_cases.user.grant_granular_permissions import (
    GrantGranularPermissionsUseCase,
)
from grainguard.application.use_cases.user.revoke_granular_permissions import (
    RevokeGranularPermissionsUseCase,
)
from grainguard.config import Settings, get_settings
from grainguard.infrastructure.auth.keycloak_provider import KeycloakProvider
from grainguard.infrastructure.persistence.memory import unit_of_work as memory_uow
from grainguard.infrastructure.persistence.postgres import unit_of_work as postgres_uow
from grainguard.infrastructure.persistence.postgres.connection import create_pool
from grainguard.infrastructure.persistence.retry import RetryingUseCase, RetryPolicy
from grainguard.interfaces.api.errors import register_error_handlers
from grainguard.interfaces.api.middleware.auth import AuthMiddleware
from grainguard.interfaces.api.middleware.cors import CORSMiddleware
from grainguard.interfaces.api.middleware.pool_lifespan import PoolLifespanMiddleware
from grainguard.interfaces.api.resources.clients import (
    ClientResource,
    ClientsResource,
    SecurableItemsResource,
)
from grainguard.interfaces.api.resources.groups import (
    GroupResource,
    GroupRolesResource,
    GroupsResource,
    GroupUsersResource,
)
from grainguard.interfaces.api.resources.health import HealthResource
from grainguard.interfaces.api.resources.permissions import (
    PermissionResource,
    PermissionsResource,
)
from grainguard.interfaces.api.resources.roles import (
    RolePermissionsResource,
    RoleResource,
    RolesResource,
)
from grainguard.interfaces.api.resources.users import (
    GranularPermissionsResource,
    UserPermissionsResource,
)

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the service."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _retry_policy(settings: Settings) -> RetryPolicy:
    return RetryPolicy(
        max_attempts=settings.storage_retry_attempts,
        initial_wait=settings.storage_retry_initial_wait,
        max_wait=settings.storage_retry_max_wait,
    )


def add_routes(app: falcon.asgi.App, uow_factory, retry_policy: RetryPolicy | None = None) -> None:
    """Wire use cases and resources onto the app."""
    policy = retry_policy or RetryPolicy()

    def retried(use_case):
        return RetryingUseCase(use_case, policy)

    get_roles = retried(GetRolesUseCase(unit_of_work_factory=uow_factory))
    get_permissions = retried(GetPermissionsUseCase(unit_of_work_factory=uow_factory))
    get_group_roles = retried(GetGroupRolesUseCase(unit_of_work_factory=uow_factory))

    user_permissions_resource = UserPermissionsResource(
        retried(GetEffectivePermissionsUseCase(unit_of_work_factory=uow_factory))
    )
    granular_permissions_resource = GranularPermissionsResource(
        retried(GetGranularPermissionsUseCase(unit_of_work_factory=uow_factory)),
        retried(GrantGranularPermissionsUseCase(unit_of_work_factory=uow_factory)),
        retried(RevokeGranularPermissionsUseCase(unit_of_work_factory=uow_factory)),
    )
    permissions_resource = PermissionsResource(
        retried(AddPermissionUseCase(unit_of_work_factory=uow_factory)), get_permissions
    )
    permission_resource = PermissionResource(
        get_permissions, retried(DeletePermissionUseCase(unit_of_work_factory=uow_factory))
    )
    roles_resource = RolesResource(
        get_roles, retried(AddRoleUseCase(unit_of_work_factory=uow_factory)), uow_factory
    )
    role_resource = RoleResource(
        get_roles, retried(DeleteRoleUseCase(unit_of_work_factory=uow_factory)), uow_factory
    )
    role_permissions_resource = RolePermissionsResource(
        retried(AddPermissionsToRoleUseCase(unit_of_work_factory=uow_factory)),
        retried(RemovePermissionsFromRoleUseCase(unit_of_work_factory=uow_factory)),
        uow_factory,
    )
    groups_resource = GroupsResource(retried(AddGroupUseCase(unit_of_work_factory=uow_factory)))
    group_resource = GroupResource(
        get_group_roles, retried(DeleteGroupUseCase(unit_of_work_factory=uow_factory))
    )
    group_roles_resource = GroupRolesResource(
        get_group_roles,
        retried(AddRoleToGroupUseCase(unit_of_work_factory=uow_factory)),
        retried(RemoveRoleFromGroupUseCase(unit_of_work_factory=uow_factory)),
    )
    group_users_resource = GroupUsersResource(
        retried(AddUserToGroupUseCase(unit_of_work_factory=uow_factory)),
        retried(RemoveUserFromGroupUseCase(unit_of_work_factory=uow_factory)),
    )
    get_clients = retried(GetClientsUseCase(unit_of_work_factory=uow_factory))
    clients_resource = ClientsResource(
        get_clients, retried(AddClientUseCase(unit_of_work_factory=uow_factory))
    )
    client_resource = ClientResource(
        get_clients, retried(DeleteClientUseCase(unit_of_work_factory=uow_factory))
    )
    securable_items_resource = SecurableItemsResource(
        retried(GetSecurableItemUseCase(unit_of_work_factory=uow_factory)),
        retried(AddSecurableItemUseCase(unit_of_work_factory=uow_factory)),
    )
    health_resource = HealthResource(uow_factory)

    app.add_route("/v1/health", health_resource)
    app.add_route("/v1/health/ready", health_resource, suffix="ready")
    app.add_route("/v1/user/permissions", user_permissions_resource)
    app.add_route(
        "/v1/user/{identity_provider}/{subject_id}/permissions",
        granular_permissions_resource,
    )
    app.add_route("/v1/permissions", permissions_resource)
    app.add_route("/v1/permissions/{permission_id}", permission_resource)
    app.add_route("/v1/roles", roles_resource)
    app.add_route("/v1/roles/{role_id}", role_resource)
    app.add_route("/v1/roles/{role_id}/permissions", role_permissions_resource)
    app.add_route("/v1/groups", groups_resource)
    app.add_route("/v1/groups/{group_name}", group_resource)
    app.add_route("/v1/groups/{group_name}/roles", group_roles_resource)
    app.add_route("/v1/groups/{group_name}/users", group_users_resource)
    app.add_route("/v1/clients", clients_resource)
    app.add_route("/v1/clients/{client_id}", client_resource)
    app.add_route("/v1/clients/{client_id}/securableitems", securable_items_resource)
    app.add_route(
        "/v1/clients/{client_id}/securableitems/{securable_item_id}",
        securable_items_resource,
        suffix="item",
    )


def create_grainguard_app(settings: Settings | None = None) -> falcon.asgi.App:
    """Composition root - build Falcon app with all dependencies."""
    settings = settings or get_settings()

    middleware = []
    cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    middleware.append(CORSMiddleware(cors_origins))

    if settings.use_in_memory_stores:
        logger.warning("Using in-memory stores; data is lost on restart")
        uow_factory = memory_uow.create_uow_factory()
    else:
        pool = create_pool(settings.database_url)
        uow_factory = postgres_uow.create_uow_factory(pool)
        middleware.append(PoolLifespanMiddleware(pool))

    keycloak = (
        KeycloakProvider(
            server_url=settings.keycloak_url,
            realm=settings.keycloak_realm,
            client_id=settings.keycloak_client_id,
            client_secret=settings.keycloak_client_secret,
            groups_claim=settings.groups_claim,
            identity_provider_claim=settings.identity_provider_claim,
            default_identity_provider=settings.default_identity_provider,
        )
        if settings.keycloak_client_secret
        else None
    )
    if keycloak is None:
        logger.warning("Keycloak client secret not set; bearer tokens will be rejected")
    middleware.append(AuthMiddleware(keycloak))

    app = falcon.asgi.App(middleware=middleware)
    register_error_handlers(app)
    add_routes(app, uow_factory, _retry_policy(settings))
    return app


def run_server() -> None:
    """Run uvicorn server."""
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)
    app = create_grainguard_app(settings)
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level=settings.log_level.lower())
