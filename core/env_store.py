# =============================================================================
# core/env_store.py  —  Managed Environment Variables
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Remembers environment variables set through the env tools, together with
#   a description and a "secret" flag, and mirrors every value into a real
#   environment mapping so child processes and libraries can see it.
#
# WHICH ENVIRONMENT?
#   The store is given the mapping to mirror into.  The server passes
#   os.environ; tests pass a plain dict so nothing leaks between them.
#
# KEYS:
#   Keys arrive already sanitized (see core/validation.py).  Within one store
#   a key is unique: setting it again updates value/description/secret flag,
#   keeps created_at and stamps updated_at.
# =============================================================================

from typing import MutableMapping, Optional

from core.models import EnvironmentVariable, utcnow


class EnvVarStore:
    def __init__(self, environ: Optional[MutableMapping[str, str]] = None) -> None:
        self._vars: dict[str, EnvironmentVariable] = {}
        self._environ = environ if environ is not None else {}

    def __len__(self) -> int:
        return len(self._vars)

    def __contains__(self, key: object) -> bool:
        return key in self._vars

    def get(self, key: str) -> Optional[EnvironmentVariable]:
        return self._vars.get(key)

    def all(self) -> list[EnvironmentVariable]:
        return list(self._vars.values())

    def set(
        self,
        key: str,
        value: str,
        description: Optional[str] = None,
        is_secret: bool = False,
    ) -> tuple[EnvironmentVariable, bool]:
        """Insert or replace a variable.  Returns (variable, created)."""
        existing = self._vars.get(key)
        if existing is not None:
            existing.value = value
            existing.description = description
            existing.is_secret = is_secret
            existing.updated_at = utcnow()
            var, created = existing, False
        else:
            var = EnvironmentVariable(key=key, value=value, description=description, is_secret=is_secret)
            self._vars[key] = var
            created = True
        self._environ[key] = value
        return var, created

    def delete(self, key: str) -> Optional[EnvironmentVariable]:
        var = self._vars.pop(key, None)
        if var is not None:
            self._environ.pop(key, None)
        return var

    def lookup_system(self, key: str) -> Optional[str]:
        """Value from the mirrored environment, managed or not."""
        return self._environ.get(key)

    def secret_count(self) -> int:
        return sum(1 for var in self._vars.values() if var.is_secret)

    def list_vars(self, filter: Optional[str] = None, include_secrets: bool = False) -> list[EnvironmentVariable]:
        variables = self.all()
        if filter:
            needle = filter.lower()
            variables = [
                v for v in variables
                if needle in v.key.lower() or (v.description and needle in v.description.lower())
            ]
        if not include_secrets:
            variables = [v for v in variables if not v.is_secret]
        return sorted(variables, key=lambda v: v.key)
