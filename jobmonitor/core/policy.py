"""URL authorization rules: ordered (path pattern, requirement) table, first match wins."""

import enum
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from jobmonitor.models.user import Role
from jobmonitor.schemas.auth import SecurityPrincipal


class Access(enum.Enum):
    PUBLIC = "public"
    AUTHENTICATED = "authenticated"
    ROLES = "roles"


class Decision(enum.Enum):
    PERMIT = "permit"
    UNAUTHENTICATED = "unauthenticated"  # 401
    FORBIDDEN = "forbidden"  # 403


def ant_pattern_to_regex(pattern: str) -> re.Pattern[str]:
    """
    Compile an Ant-style path pattern.

    ``*`` matches within one segment, ``?`` one character, ``**`` any number of
    segments; a trailing ``/**`` also matches the bare prefix (``/api/auth``).
    """
    suffix = ""
    if pattern.endswith("/**"):
        pattern = pattern[:-3]
        suffix = "(?:/.*)?"
    out: list[str] = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**", i):
            out.append(".*")
            i += 2
        elif pattern[i] == "*":
            out.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            out.append("[^/]")
            i += 1
        else:
            out.append(re.escape(pattern[i]))
            i += 1
    return re.compile("^" + "".join(out) + suffix + "$")


@dataclass(frozen=True)
class Rule:
    pattern: str
    access: Access
    roles: frozenset[Role] = frozenset()
    regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.access is Access.ROLES and not self.roles:
            raise ValueError(f"Rule {self.pattern!r} requires roles but none were given")
        object.__setattr__(self, "regex", ant_pattern_to_regex(self.pattern))

    def matches(self, path: str) -> bool:
        return self.regex.match(path) is not None


def public(*patterns: str) -> list[Rule]:
    return [Rule(p, Access.PUBLIC) for p in patterns]


def has_any_role(pattern: str, *roles: Role) -> Rule:
    return Rule(pattern, Access.ROLES, frozenset(roles))


def authenticated(pattern: str) -> Rule:
    return Rule(pattern, Access.AUTHENTICATED)


def normalize_path(path: str) -> str:
    path = re.sub(r"/{2,}", "/", path or "/")
    if len(path) > 1:
        path = path.rstrip("/")
    return path or "/"


class AuthorizationPolicy:
    """Evaluates the rule table. A path no rule matches is denied."""

    def __init__(self, rules: Iterable[Rule]) -> None:
        self.rules: tuple[Rule, ...] = tuple(rules)

    def match(self, path: str) -> Rule | None:
        path = normalize_path(path)
        for rule in self.rules:
            if rule.matches(path):
                return rule
        return None

    def is_public(self, path: str) -> bool:
        rule = self.match(path)
        return rule is not None and rule.access is Access.PUBLIC

    def decide(self, path: str, principal: SecurityPrincipal | None) -> Decision:
        rule = self.match(path)
        if rule is not None and rule.access is Access.PUBLIC:
            return Decision.PERMIT
        if principal is None:
            return Decision.UNAUTHENTICATED
        if rule is None:
            return Decision.FORBIDDEN
        if rule.access is Access.ROLES and not principal.has_any_role(*rule.roles):
            return Decision.FORBIDDEN
        return Decision.PERMIT


def default_policy(api_prefix: str = "/api") -> AuthorizationPolicy:
    """The application's rule table."""
    return AuthorizationPolicy(
        [
            *public(f"{api_prefix}/auth/**", f"{api_prefix}/public/**"),
            # Frontend bundle
            *public("/", "/static/**", "/assets/**", "/*.html", "/*.css", "/*.js", "/*.ico"),
            # API docs
            *public("/docs", "/docs/**", "/redoc", "/openapi.json"),
            *public(f"{api_prefix}/health"),
            has_any_role(f"{api_prefix}/admin/**", Role.ADMIN),
            has_any_role(f"{api_prefix}/user/**", Role.ADMIN, Role.USER),
            authenticated("/**"),
        ]
    )
