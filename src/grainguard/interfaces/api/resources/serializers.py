"""Response bodies for API resources."""

from grainguard.domain.entities import Client, Group, Permission, Role, SecurableItem


def permission_to_dict(p: Permission) -> dict:
    return {
        "id": str(p.id),
        "grain": p.grain,
        "securable_item": p.securable_item,
        "name": p.name,
        "created_at": p.created_at.isoformat(),
        "created_by": p.created_by,
        "modified_at": p.modified_at.isoformat() if p.modified_at else None,
        "modified_by": p.modified_by,
    }


def role_to_dict(r: Role, permissions: dict | None = None) -> dict:
    """Role body; ``permissions`` maps permission id to Permission for expansion."""
    permissions = permissions or {}

    def _expand(ids: list) -> list[dict]:
        return [
            permission_to_dict(permissions[pid]) if pid in permissions else {"id": str(pid)}
            for pid in ids
        ]

    return {
        "id": str(r.id),
        "grain": r.grain,
        "securable_item": r.securable_item,
        "name": r.name,
        "parent_role": str(r.parent_role) if r.parent_role else None,
        "child_roles": [str(c) for c in r.child_roles],
        "permissions": _expand(r.permissions),
        "denied_permissions": _expand(r.denied_permissions),
        "created_at": r.created_at.isoformat(),
        "created_by": r.created_by,
        "modified_at": r.modified_at.isoformat() if r.modified_at else None,
        "modified_by": r.modified_by,
    }


def group_to_dict(g: Group, roles: list[Role] | None = None) -> dict:
    body = {
        "id": g.id,
        "group_name": g.name,
        "group_source": g.source.value,
        "users": [
            {"identity_provider": u.identity_provider, "subject_id": u.subject_id}
            for u in g.users
        ],
    }
    if roles is not None:
        body["roles"] = [role_to_dict(r) for r in roles]
    return body


def securable_item_to_dict(s: SecurableItem) -> dict:
    return {
        "id": str(s.id),
        "name": s.name,
        "securable_items": [securable_item_to_dict(child) for child in s.securable_items],
        "created_at": s.created_at.isoformat(),
        "created_by": s.created_by,
        "modified_at": s.modified_at.isoformat() if s.modified_at else None,
        "modified_by": s.modified_by,
    }


def client_to_dict(c: Client) -> dict:
    return {
        "id": c.id,
        "name": c.name,
        "top_level_securable_item": securable_item_to_dict(c.top_level_securable_item),
        "created_at": c.created_at.isoformat(),
        "created_by": c.created_by,
        "modified_at": c.modified_at.isoformat() if c.modified_at else None,
        "modified_by": c.modified_by,
    }
