# ============================================================================
# CATALOG DDL RENDERING
# ============================================================================
# EPOCH: 1 - SCHEMA SYNC
# STATUS: Core - DDL text from catalog rows
# PURPOSE: Render tables, views, policies, routines, cron jobs and types
# LAST_REVIEWED: 17 OCT 2026
# EXPORTS: CatalogDDL
# DEPENDENCIES: core.schema.ddl_utils
# ============================================================================
"""
Catalog DDL Rendering.

Pure functions from catalog query rows (dicts, as returned by
psycopg's dict_row) to the DDL text written into schema files. No
database access happens here; repositories fetch the rows and the
introspection service wires the two together.

Each rendered object starts with a comment line (the object's comment,
or a "<Kind>: <name>" marker) and ends with a COMMENT ON statement,
either the real one or a commented-out placeholder to fill in.

Usage:
    from core.schema.sql_generator import CatalogDDL

    ddl = CatalogDDL.table(
        name="users", schema="public",
        columns=column_rows, primary_keys=["id"],
    )
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

from core.schema.ddl_utils import join_columns, quote_literal

Row = Mapping[str, Any]

PLACEHOLDER_COMMENT = "'_your_comment_here_'"


def _comment_on(target: str, comment: Optional[str]) -> str:
    """Real COMMENT ON statement, or the commented placeholder."""
    if comment:
        return f"COMMENT ON {target} IS {quote_literal(comment)};\n\n"
    return f"-- COMMENT ON {target} IS {PLACEHOLDER_COMMENT};\n\n"


def _comment_header(comment: Optional[str], fallback: str) -> str:
    """SQL line comment above a definition, one "-- " per comment line."""
    if not comment:
        return f"-- {fallback}\n"
    return "".join(f"-- {line}".rstrip() + "\n" for line in comment.splitlines())


def _roles_text(roles: Any) -> str:
    """Policy roles from a name[] array or its text form "{a,b}"."""
    if roles is None:
        return ""
    if isinstance(roles, (list, tuple)):
        return ", ".join(str(r) for r in roles)
    return str(roles).replace("{", "").replace("}", "").replace('"', "")


class CatalogDDL:
    """
    DDL renderers for each object kind.

    All methods are static and return plain text.
    """

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    @staticmethod
    def column_type(column: Row) -> str:
        """
        Column type text.

        Prefers format_type() output, which already carries length and
        precision modifiers.
        """
        full_type = column.get("full_type")
        if full_type:
            return full_type
        data_type = column.get("data_type") or "text"
        if data_type == "USER-DEFINED" and column.get("udt_name"):
            data_type = column["udt_name"]
        if column.get("character_maximum_length"):
            data_type += f"({column['character_maximum_length']})"
        return data_type

    @staticmethod
    def column_definition(column: Row) -> str:
        definition = f"  {column['column_name']} {CatalogDDL.column_type(column)}"
        if column.get("is_nullable") == "NO":
            definition += " NOT NULL"
        if column.get("column_default"):
            definition += f" DEFAULT {column['column_default']}"
        return definition

    @staticmethod
    def table(
        name: str,
        schema: str,
        columns: Sequence[Row],
        primary_keys: Sequence[str] = (),
        unique_constraints: Sequence[Row] = (),
        foreign_keys: Sequence[Row] = (),
        table_comment: Optional[str] = None,
        column_comments: Optional[Dict[str, str]] = None,
    ) -> str:
        """
        Render CREATE TABLE with inline constraints and comments.

        Args:
            name: Table name (unqualified)
            schema: Schema name
            columns: Rows with column_name, full_type, is_nullable, column_default
            primary_keys: Primary key column names, in key order
            unique_constraints: Rows with constraint_name, columns
            foreign_keys: Rows with constraint_name, columns,
                foreign_table_schema, foreign_table_name, foreign_columns
            table_comment: obj_description of the table
            column_comments: column name -> comment

        Returns:
            DDL text
        """
        ddl = _comment_header(table_comment, f"Table: {name}")
        ddl += f"CREATE TABLE IF NOT EXISTS {name} (\n"

        parts: List[str] = [CatalogDDL.column_definition(col) for col in columns]
        if primary_keys:
            parts.append(f"  PRIMARY KEY ({join_columns(primary_keys)})")
        for unique in unique_constraints:
            parts.append(f"  CONSTRAINT {unique['constraint_name']} UNIQUE ({unique['columns']})")
        for fk in foreign_keys:
            parts.append(
                f"  CONSTRAINT {fk['constraint_name']} FOREIGN KEY ({fk['columns']}) "
                f"REFERENCES {fk['foreign_table_schema']}.{fk['foreign_table_name']} "
                f"({fk['foreign_columns']})"
            )

        ddl += ",\n".join(parts)
        ddl += "\n);\n\n"
        ddl += _comment_on(f"TABLE {schema}.{name}", table_comment)

        if column_comments:
            ddl += "\n-- Column comments\n"
            for column_name, comment in column_comments.items():
                ddl += (
                    f"COMMENT ON COLUMN {schema}.{name}.{column_name} "
                    f"IS {quote_literal(comment)};\n"
                )

        return ddl

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @staticmethod
    def security_invoker_clause(reloptions: Optional[Sequence[str]]) -> str:
        """WITH (security_invoker = ...) clause from pg_class.reloptions."""
        for option in reloptions or ():
            if option.startswith("security_invoker="):
                value = option.split("=", 1)[1].lower()
                if value in ("on", "true"):
                    return " WITH (security_invoker = on)"
                if value in ("off", "false"):
                    return " WITH (security_invoker = off)"
                break
        return ""

    @staticmethod
    def view(
        name: str,
        schema: str,
        definition: str,
        reloptions: Optional[Sequence[str]] = None,
        comment: Optional[str] = None,
    ) -> str:
        """Render CREATE OR REPLACE VIEW."""
        ddl = _comment_header(comment, f"View: {name}")
        body = definition.rstrip().rstrip(";")
        ddl += f"CREATE OR REPLACE VIEW {name}{CatalogDDL.security_invoker_clause(reloptions)} AS\n"
        ddl += f"{body};\n\n"
        ddl += _comment_on(f"VIEW {schema}.{name}", comment)
        return ddl

    # ------------------------------------------------------------------
    # Row level security
    # ------------------------------------------------------------------

    @staticmethod
    def rls_policies(schema: str, table: str, policies: Sequence[Row]) -> str:
        """
        Render ENABLE ROW LEVEL SECURITY plus every policy on one table.

        Args:
            schema: Schema name
            table: Table name
            policies: pg_policies rows for this table
        """
        ddl = f"-- RLS Policies for {schema}.{table}\n"
        ddl += "-- Row Level Security policies to control data access at the row level\n\n"
        ddl += f"ALTER TABLE {schema}.{table} ENABLE ROW LEVEL SECURITY;\n\n"

        for policy in policies:
            ddl += f"CREATE POLICY {policy['policyname']}\n"
            ddl += f"  ON {schema}.{table}\n"
            ddl += f"  AS {policy.get('permissive') or 'PERMISSIVE'}\n"
            ddl += f"  FOR {policy.get('cmd') or 'ALL'}\n"

            roles = _roles_text(policy.get("roles"))
            if roles.strip():
                ddl += f"  TO {roles}\n"
            if policy.get("qual"):
                ddl += f"  USING ({policy['qual']})\n"
            if policy.get("with_check"):
                ddl += f"  WITH CHECK ({policy['with_check']})\n"
            ddl += ";\n\n"

        return ddl

    # ------------------------------------------------------------------
    # Functions and triggers
    # ------------------------------------------------------------------

    @staticmethod
    def function_signature(row: Row) -> str:
        return f"{row['schema_name']}.{row['name']}({row.get('identity_args') or ''})"

    @staticmethod
    def function(row: Row) -> str:
        """Render a function or procedure from pg_get_functiondef output."""
        signature = CatalogDDL.function_signature(row)
        comment = row.get("comment")

        ddl = _comment_header(comment, f"Function: {signature}")
        definition = row["definition"]
        if not definition.strip().endswith(";"):
            definition += ";"
        ddl += definition + "\n\n"
        ddl += _comment_on(f"FUNCTION {signature}", comment)
        return ddl

    @staticmethod
    def trigger(row: Row) -> str:
        """Render a trigger from pg_get_triggerdef output."""
        ddl = f"-- Trigger: {row['trigger_name']} on {row['schema_name']}.{row['table_name']}\n"
        ddl += "-- Database trigger that automatically executes in response to certain events\n\n"
        ddl += row["definition"].rstrip().rstrip(";") + ";"
        return ddl

    # ------------------------------------------------------------------
    # Cron jobs
    # ------------------------------------------------------------------

    @staticmethod
    def cron_job_name(row: Row) -> str:
        return row.get("jobname") or f"job_{row['jobid']}"

    @staticmethod
    def cron_job(row: Row) -> str:
        """Render a pg_cron job as a cron.schedule() call."""
        name = CatalogDDL.cron_job_name(row)
        ddl = f"-- Cron Job: {name}\n"
        ddl += "-- Scheduled job that runs automatically at specified intervals\n"
        ddl += f"-- Schedule: {row['schedule']}\n"
        ddl += f"-- Command: {row['command']}\n\n"
        ddl += (
            f"SELECT cron.schedule({quote_literal(name)}, {quote_literal(row['schedule'])}, "
            f"{quote_literal(row['command'])});"
        )
        return ddl

    # ------------------------------------------------------------------
    # Custom types
    # ------------------------------------------------------------------

    @staticmethod
    def enum_type(type_name: str, labels: Sequence[str]) -> str:
        values = ", ".join(quote_literal(label) for label in labels)
        return f"CREATE TYPE {type_name} AS ENUM ({values});"

    @staticmethod
    def composite_type(type_name: str, attributes: Sequence[Row]) -> str:
        columns = ",\n".join(f"  {a['column_name']} {a['column_type']}" for a in attributes)
        return f"CREATE TYPE {type_name} AS (\n{columns}\n);"

    @staticmethod
    def domain_type(type_name: str, domain: Row) -> str:
        ddl = f"CREATE DOMAIN {type_name} AS {domain['base_type']}"
        if domain.get("typdefault"):
            ddl += f" DEFAULT {domain['typdefault']}"
        if domain.get("typnotnull"):
            ddl += " NOT NULL"
        if domain.get("constraints"):
            ddl += f" CHECK ({domain['constraints']})"
        return ddl + ";"

    @staticmethod
    def custom_type(schema: str, type_name: str, body: str, comment: Optional[str] = None) -> str:
        """Wrap a CREATE TYPE/DOMAIN body with its comment lines."""
        ddl = _comment_header(comment, f"Type: {type_name}")
        ddl += body + "\n\n"
        ddl += _comment_on(f"TYPE {schema}.{type_name}", comment)
        return ddl


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "CatalogDDL",
    "PLACEHOLDER_COMMENT",
]
