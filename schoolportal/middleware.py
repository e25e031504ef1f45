import logging
import re
from dataclasses import dataclass

from django.conf import settings
from django.core.cache import cache
from django.http import JsonResponse
from django.utils.timezone import now

logger = logging.getLogger(__name__)

DEFAULT_RULES = {
    "login": "5/15m",
    "api": "100/m",
    "upload": "10/5m",
    "content": "20/m",
    "search": "30/m",
    "public": "60/m",
    "default": "60/m",
}

RULE_MESSAGES = {
    "login": "Too many login attempts. Please try again later.",
    "upload": "Too many file uploads. Please wait before uploading again.",
    "content": "Too many content operations. Please slow down.",
    "search": "Too many search requests. Please wait before searching again.",
}


@dataclass(frozen=True)
class RateLimitRule:
    key: str
    limit: int
    window_seconds: int

    @property
    def message(self) -> str:
        return RULE_MESSAGES.get(self.key, "Too many requests. Please slow down.")


def _parse_rate(value: str) -> tuple[int, int]:
    """
    Parse strings like "5/15m", "120/m", "100/60s" into (limit, window_seconds).
    """
    match = re.fullmatch(r"\s*(\d+)\s*/\s*(\d+)?\s*([smhd])\s*", value)
    if not match:
        raise ValueError(f"Invalid rate limit value: {value}")

    limit = int(match.group(1))
    window = int(match.group(2) or 1)
    unit = match.group(3)
    unit_seconds = {"s": 1, "m": 60, "h": 3600, "d": 86400}[unit]
    return limit, window * unit_seconds


def _client_ip(request) -> str:
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR", "unknown")


def _make_rules() -> tuple[dict[str, RateLimitRule], list[tuple[str, RateLimitRule]]]:
    config = getattr(settings, "RATE_LIMITS", {})
    rates = {**DEFAULT_RULES, **config.get("rules", {})}

    rules: dict[str, RateLimitRule] = {}
    for name, rate in rates.items():
        limit, window = _parse_rate(rate)
        rules[name] = RateLimitRule(name, limit, window)

    routes: list[tuple[str, RateLimitRule]] = []
    for prefix, name in config.get("routes", []):
        routes.append((prefix, rules.get(name, rules["default"])))

    return rules, routes


class RateLimitMiddleware:
    """
    Fixed-window rate limiting keyed by user id (or client IP for anonymous
    requests). The rule is chosen by the first configured path prefix that
    matches the request path.
    """

    def __init__(self, get_response):
        self.get_response = get_response
        self._rules, self._routes = _make_rules()

    def __call__(self, request):
        rule = self._rule_for(request.path)
        if rule is None:
            return self.get_response(request)

        identity = self._identity(request)
        count, reset_at = self._hit(identity, rule)
        if count > rule.limit:
            retry_after = max(0, reset_at - int(now().timestamp()))
            logger.warning(
                "Rate limit %s exceeded for %s on %s", rule.key, identity, request.path
            )
            return JsonResponse(
                {
                    "success": False,
                    "message": rule.message,
                    "retry_after": retry_after,
                    "error_code": "RATE_LIMIT_EXCEEDED",
                },
                status=429,
            )

        response = self.get_response(request)
        response["X-RateLimit-Limit"] = str(rule.limit)
        response["X-RateLimit-Remaining"] = str(max(0, rule.limit - count))
        response["X-RateLimit-Reset"] = str(reset_at)
        return response

    def _rule_for(self, path: str) -> RateLimitRule | None:
        for prefix, rule in self._routes:
            if path.startswith(prefix):
                return rule
        return None

    @staticmethod
    def _identity(request) -> str:
        user = getattr(request, "user", None)
        if user is not None and user.is_authenticated:
            return f"user:{user.pk}"
        return f"ip:{_client_ip(request)}"

    def _hit(self, identity: str, rule: RateLimitRule) -> tuple[int, int]:
        window_key = int(now().timestamp() // rule.window_seconds)
        reset_at = (window_key + 1) * rule.window_seconds
        cache_key = f"rl:{rule.key}:{identity}:{window_key}"

        # Fast path: create key on first request.
        if cache.add(cache_key, 1, timeout=rule.window_seconds):
            return 1, reset_at

        try:
            count = cache.incr(cache_key)
        except ValueError:
            count = 1
            cache.set(cache_key, count, timeout=rule.window_seconds)

        return count, reset_at
