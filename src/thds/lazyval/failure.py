"""What a lazy value does after its initializer raises.

- "retry": nothing is cached. The exception propagates, and the next access calls the
  initializer again.
- "poison": the exception is cached. It propagates now, and the very same exception
  object is raised again on every later access, without calling the initializer.

Either way, the initializer is never called again once it has succeeded.
"""

import typing as ty

from . import config

FailurePolicy = ty.Literal["retry", "poison"]
RETRY: FailurePolicy = "retry"
POISON: FailurePolicy = "poison"


class InvalidFailurePolicy(ValueError):
    pass


def parse_policy(policy: ty.Any) -> FailurePolicy:
    normalized = str(policy).strip().lower()
    if normalized not in ty.get_args(FailurePolicy):
        raise InvalidFailurePolicy(
            f"'{policy}' is not a failure policy. Choose one of {ty.get_args(FailurePolicy)}"
        )
    return ty.cast(FailurePolicy, normalized)


ON_FAILURE = config.item("on_failure", RETRY, parse=parse_policy)


def resolve(policy: ty.Optional[str]) -> FailurePolicy:
    """An explicit policy wins; otherwise whatever is configured right now."""
    return ON_FAILURE() if policy is None else parse_policy(policy)
