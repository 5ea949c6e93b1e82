# ============================================================================
# MODEL -> RLS / SECURITY SQL GENERATOR
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Generators - Roles, security functions and RLS policies
# PURPOSE: gen:rls output (also appended to gen:sql)
# CREATED: 17 OCT 2026
# ============================================================================
"""
Model -> RLS / Security SQL Generator

Output order:
1. Role master tables and role inserts, when the model declares roles
2. Security functions: explicit sql, else a template (simple | tenant),
   else a fallback body
3. One policy per table and action: explicit using, else a role
   template, else a "true" placeholder to be replaced

Templates:
    function simple   returns the caller's role name via user_roles/m_roles
    function tenant   same, restricted to the caller's tenant
    policy simple     caller holds one of the listed roles
    policy tenant     row belongs to the caller's tenant and role check
"""

from pathlib import Path
from typing import List, Union

from core.models import DataModel, PolicyDef, SecurityFunctionDef
from core.schema.ddl_utils import quote_literal
from generators.base import GeneratedFile

USER_ID_EXPR = "current_setting('request.jwt.claim.sub', true)::uuid"
TENANT_ID_EXPR = "current_setting('tenant.id', true)::uuid"

ROLE_TABLES_SQL = (
    "CREATE TABLE IF NOT EXISTS m_roles (\n  id uuid PRIMARY KEY,\n  name text NOT NULL\n);\n\n"
    "CREATE TABLE IF NOT EXISTS user_roles (\n  id uuid PRIMARY KEY,\n  user_id uuid NOT NULL,\n"
    "  role_id uuid NOT NULL\n);\n\n"
)

_FUNCTION_TEMPLATES = {
    "simple": (
        "CREATE OR REPLACE FUNCTION {name}() RETURNS text AS $$\n"
        "BEGIN\n"
        "  RETURN (\n"
        "    SELECT r.name FROM user_roles ur\n"
        "    JOIN m_roles r ON ur.role_id = r.id\n"
        "    WHERE ur.user_id = {user_id}\n"
        "    LIMIT 1\n"
        "  );\n"
        "END;\n"
        "$$ LANGUAGE plpgsql SECURITY DEFINER;"
    ),
    "tenant": (
        "CREATE OR REPLACE FUNCTION {name}() RETURNS text AS $$\n"
        "BEGIN\n"
        "  RETURN (\n"
        "    SELECT r.name FROM user_roles ur\n"
        "    JOIN m_roles r ON ur.role_id = r.id\n"
        "    WHERE ur.user_id = {user_id}\n"
        "      AND ur.tenant_id = {tenant_id}\n"
        "    LIMIT 1\n"
        "  );\n"
        "END;\n"
        "$$ LANGUAGE plpgsql SECURITY DEFINER;"
    ),
}

_POLICY_TEMPLATES = {
    "simple": (
        "EXISTS (SELECT 1 FROM user_roles ur JOIN m_roles r ON ur.role_id = r.id "
        "WHERE ur.user_id = auth.uid() AND r.name IN ({roles}))"
    ),
    "tenant": (
        "tenant_id = {tenant_id} AND EXISTS (SELECT 1 FROM user_roles ur "
        "JOIN m_roles r ON ur.role_id = r.id "
        "WHERE ur.user_id = auth.uid() AND r.name IN ({roles}))"
    ),
}


def function_template(name: str, template_type: str) -> str:
    """Security function body from a built-in template; unknown types fall back to simple."""
    template = _FUNCTION_TEMPLATES.get(template_type, _FUNCTION_TEMPLATES["simple"])
    return template.format(name=name, user_id=USER_ID_EXPR, tenant_id=TENANT_ID_EXPR)


def policy_template(roles: List[str], template_type: str) -> str:
    """USING expression for a role-based policy."""
    template = _POLICY_TEMPLATES.get(template_type, _POLICY_TEMPLATES["simple"])
    return template.format(
        roles=", ".join(quote_literal(role) for role in roles),
        tenant_id=TENANT_ID_EXPR,
    )


def _fallback_function(name: str, has_roles: bool) -> str:
    if has_roles:
        return function_template(name, "simple")
    return (
        f"CREATE OR REPLACE FUNCTION {name}() RETURNS text AS $$\n"
        "BEGIN\n"
        "  -- Replace with the real role lookup\n"
        "  RETURN 'admin';\n"
        "END;\n"
        "$$ LANGUAGE plpgsql;"
    )


def function_sql(name: str, function: SecurityFunctionDef, has_roles: bool) -> str:
    body = function.sql
    if not body and function.use_template:
        body = function_template(name, function.template_type)
    if not body:
        body = _fallback_function(name, has_roles)
    return f"-- {name}: returns the current user's role\n{body}\n\n"


def policy_using(policy: PolicyDef) -> str:
    if policy.using:
        return policy.using
    if policy.use_template and policy.role:
        return policy_template(policy.role, policy.template_type)
    return "true /* replace with the real condition */"


def policy_sql(table: str, action: str, policy: PolicyDef) -> str:
    return (
        f"-- {table}: {action} policy\n"
        f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY;\n"
        f"CREATE POLICY {table}_{action}_policy ON {table}\n"
        f"  FOR {action.upper()}\n"
        f"  USING ({policy_using(policy)});\n\n"
    )


def render_rls_sql(model: DataModel) -> str:
    sql = "-- Generated by supatool: RLS and security policies\n\n"

    if model.roles:
        sql += "-- Role master and user role tables\n"
        sql += ROLE_TABLES_SQL
        for role in model.roles:
            sql += (
                "INSERT INTO m_roles (id, name) VALUES "
                f"(gen_random_uuid(), {quote_literal(role)}) ON CONFLICT DO NOTHING;\n"
            )
        sql += "\n"

    for name, function in model.security.functions.items():
        sql += function_sql(name, function, bool(model.roles))

    for table, actions in model.security.policies.items():
        for action, policy in actions.items():
            sql += policy_sql(table, action, policy)

    return sql


def generate_rls(model: DataModel, out_path: Union[str, Path]) -> GeneratedFile:
    """Roles, security functions and policies for the whole model."""
    return GeneratedFile(Path(out_path), render_rls_sql(model))


__all__ = [
    "function_template",
    "policy_template",
    "function_sql",
    "policy_using",
    "policy_sql",
    "render_rls_sql",
    "generate_rls",
]
