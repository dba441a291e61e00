"""
Analysis types and requests.

Every analysis type is either low-level (a statistic that is always
reported) or high-level (a detector whose negative result means that
nothing was found and the series must not be reported).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple, Union

from chunkstore.utils.errors import InvalidAnalysisRequestError


PARAM_DELIMITER = "-"


class AnalysisType(str, Enum):
    """Supported analyses."""
    # low-level aggregations
    MIN = "MIN"
    MAX = "MAX"
    AVG = "AVG"
    DEV = "DEV"
    SUM = "SUM"
    COUNT = "COUNT"
    FIRST = "FIRST"
    LAST = "LAST"
    RANGE = "RANGE"
    DIFF = "DIFF"
    SDIFF = "SDIFF"
    P = "P"
    # high-level detectors
    TREND = "TREND"
    OUTLIER = "OUTLIER"
    FREQUENCY = "FREQUENCY"
    
    @property
    def is_high_level(self) -> bool:
        return self in HIGH_LEVEL_TYPES
    
    @classmethod
    def from_name(cls, name: Union[str, "AnalysisType"]) -> "AnalysisType":
        """Resolve a type from its case-insensitive name."""
        if isinstance(name, AnalysisType):
            return name
        if not isinstance(name, str) or not name.strip():
            raise InvalidAnalysisRequestError(
                f"Analysis type must be a non-empty name, got {name!r}",
                analysis=repr(name),
            )
        
        try:
            return cls[name.strip().upper()]
        except KeyError:
            supported = ", ".join(member.value for member in cls)
            raise InvalidAnalysisRequestError(
                f"Unknown analysis type '{name}', expected one of: {supported}",
                analysis=name,
            ) from None


HIGH_LEVEL_TYPES = frozenset({
    AnalysisType.TREND,
    AnalysisType.OUTLIER,
    AnalysisType.FREQUENCY,
})


@dataclass(frozen=True)
class AnalysisRequest:
    """An analysis type together with its raw string parameters."""
    type: AnalysisType
    params: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "type", AnalysisType.from_name(self.type))

        params = self.params
        if params is None:
            params = ()
        elif isinstance(params, str):
            params = (params,)

        try:
            params = tuple(params)
        except TypeError:
            raise InvalidAnalysisRequestError(
                f"{self.type.value} parameters must be a sequence of strings, got {params!r}",
                analysis=self.type.value,
            ) from None

        for param in params:
            if not isinstance(param, str):
                raise InvalidAnalysisRequestError(
                    f"{self.type.value} parameters must be strings, "
                    f"got {type(param).__name__} {param!r}",
                    analysis=self.type.value,
                    params=[repr(p) for p in params],
                )
        object.__setattr__(self, "params", params)

    @classmethod
    def of(cls, analysis: Union[str, AnalysisType], params: Sequence[str] = ()) -> "AnalysisRequest":
        """Build a request, resolving the type by name."""
        if isinstance(params, str):
            params = (params,)
        return cls(type=AnalysisType.from_name(analysis), params=tuple(str(p) for p in params))
    
    @property
    def is_high_level(self) -> bool:
        return self.type.is_high_level
    
    def joined_params(self, delimiter: str = PARAM_DELIMITER) -> str:
        """Parameters as one string, as reported in result records."""
        return delimiter.join(self.params)
    
    def __str__(self) -> str:
        if not self.params:
            return self.type.value
        return f"{self.type.value}:{','.join(self.params)}"


def parse_analysis_request(text: str) -> AnalysisRequest:
    """
    Parse the textual form ``name[:param,param,...]``.
    
    Examples: ``"avg"``, ``"p:0.25"``, ``"frequency:10,6"``.
    """
    if not isinstance(text, str) or not text.strip():
        raise InvalidAnalysisRequestError("Empty analysis request", analysis=repr(text))
    
    name, _, raw_params = text.strip().partition(":")
    params = tuple(p.strip() for p in raw_params.split(",")) if raw_params else ()
    if any(not p for p in params):
        raise InvalidAnalysisRequestError(
            f"Empty parameter in analysis request '{text}'",
            analysis=name,
            params=params,
        )
    return AnalysisRequest.of(name, params)
