"""Problem key registry.

A closed catalog of machine-readable error identifiers. Each entry derives
its human-readable text keys by convention:

    problem.<slug>.title
    problem.<slug>.detail

No other code should invent title/detail keys; render problem text through
build_problem_detail() so it always comes from this registry.
"""

from enum import Enum
from typing import Any, Optional, Sequence

from pydantic import BaseModel, Field

from phrasebook.i18n.resolver import MessageResolver


class ProblemKey(Enum):
    """Stable symbolic error identifiers.

    Each member's value is ``(slug, default_status)``.
    """

    VALIDATION_FAILED = ("validation-failed", 400)
    MALFORMED_REQUEST = ("malformed-request", 400)
    UNAUTHORIZED = ("unauthorized", 401)
    ACCESS_DENIED = ("access-denied", 403)
    RESOURCE_NOT_FOUND = ("resource-not-found", 404)
    DUPLICATE_CATEGORY = ("duplicate-category", 409)
    CONCURRENT_MODIFICATION = ("concurrent-modification", 409)
    INTERNAL_ERROR = ("internal-error", 500)

    def __init__(self, slug: str, default_status: Optional[int]):
        self._slug = slug
        self._default_status = default_status

    @property
    def slug(self) -> str:
        return self._slug

    @property
    def status(self) -> Optional[int]:
        """Default HTTP-style status code for this problem, if any."""
        return self._default_status

    @property
    def title_key(self) -> str:
        return f"problem.{self._slug}.title"

    @property
    def detail_key(self) -> str:
        return f"problem.{self._slug}.detail"

    @classmethod
    def from_slug(cls, slug: str) -> "ProblemKey":
        """Look up a problem by slug.

        Raises:
            ValueError: If no problem has that slug.
        """
        for problem in cls:
            if problem.slug == slug:
                return problem
        raise ValueError(f"Unknown problem slug: {slug}")


class ProblemDetail(BaseModel):
    """Problem details body (RFC 7807 shape).

    Example:
        >>> build_problem_detail(ProblemKey.RESOURCE_NOT_FOUND, resolver, ["Category", 42])
        ProblemDetail(type='about:blank', title='Resource not found', status=404, ...)
    """

    type: str = Field(default="about:blank", description="URI identifying the problem type")
    title: str = Field(..., description="Short, localized summary of the problem")
    status: Optional[int] = Field(default=None, description="Status code for this occurrence")
    detail: Optional[str] = Field(default=None, description="Localized explanation of this occurrence")
    instance: Optional[str] = Field(default=None, description="URI identifying this occurrence")


def problem_type_uri(problem: ProblemKey, type_base: Optional[str] = None) -> str:
    """Build the ``type`` URI; "about:blank" (the default) is used verbatim."""
    if not type_base or type_base == "about:blank":
        return "about:blank"
    return f"{type_base.rstrip('/')}/{problem.slug}"


def build_problem_detail(
    problem: ProblemKey,
    resolver: MessageResolver,
    detail_args: Sequence[Any] = (),
    status: Optional[int] = None,
    instance: Optional[str] = None,
    type_base: Optional[str] = None,
) -> ProblemDetail:
    """Render a problem's title and detail in the ambient locale.

    Args:
        problem: Registry entry to render.
        resolver: MessageResolver used for both text keys.
        detail_args: Positional arguments for the detail template.
        status: Overrides the problem's default status.
        instance: Optional URI of this occurrence.
        type_base: Base URI for the ``type`` member.

    Returns:
        ProblemDetail with localized title and detail.
    """
    return ProblemDetail(
        type=problem_type_uri(problem, type_base),
        title=resolver.resolve(problem.title_key),
        status=status if status is not None else problem.status,
        detail=resolver.resolve(problem.detail_key, *detail_args),
        instance=instance,
    )


class ProblemRenderer:
    """build_problem_detail() bound to a resolver and a configured type base.

    Attributes:
        resolver: MessageResolver used for title and detail text.
        type_base: Default base URI for the ``type`` member.

    Example:
        renderer = get_problem_renderer()
        body = renderer.render(ProblemKey.DUPLICATE_CATEGORY, ["Books"])
    """

    def __init__(self, resolver: MessageResolver, type_base: str = "about:blank"):
        self.resolver = resolver
        self.type_base = type_base

    def render(
        self,
        problem: ProblemKey,
        detail_args: Sequence[Any] = (),
        status: Optional[int] = None,
        instance: Optional[str] = None,
        type_base: Optional[str] = None,
    ) -> ProblemDetail:
        return build_problem_detail(
            problem,
            self.resolver,
            detail_args,
            status=status,
            instance=instance,
            type_base=type_base if type_base is not None else self.type_base,
        )
