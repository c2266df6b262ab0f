"""Statistics snapshot consumed by the evaluators.

The snapshot is produced by the topic and tf monitors once per measurement
cycle and replaced wholesale. The engine only reads it: every model here is
frozen and every category is a tuple, so an evaluator cannot mutate the
snapshot it was handed.

Categories per stats object (scan order):
    TopicStats: ok_list → non_received_list → slow_rate_list → timeout_list
    TfStats:    ok_list → timeout_list

The categories are not mutually exclusive. The same topic may show up in
both ``slow_rate_list`` and ``timeout_list`` of one snapshot.

Times are seconds (``checked_time`` and last-received times), rates are Hz.
Values are not range-checked here; a negative timeout or a NaN rate is the
monitor's problem and is reported as-is.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class TopicConfig(BaseModel):
    """A monitored topic and the thresholds it is checked against.

    Attributes:
        module: Module the topic belongs to (rule filter)
        name: Topic name, used as the fact key prefix
        timeout: Timeout threshold [s]
        warn_rate: Minimum expected rate [Hz]
    """

    model_config = ConfigDict(frozen=True)

    module: str
    name: str
    timeout: float = 0.0
    warn_rate: float = 0.0


class TfConfig(BaseModel):
    """A monitored transform relation.

    Attributes:
        module: Module the relation belongs to (rule filter)
        from_frame: Parent frame (``from`` in JSON input)
        to_frame: Child frame (``to`` in JSON input)
        timeout: Timeout threshold [s]
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    module: str
    from_frame: str = Field(alias="from")
    to_frame: str = Field(alias="to")
    timeout: float = 0.0

    @property
    def pair_name(self) -> str:
        """Rendered relation name, e.g. ``map2base_link``."""
        return f"{self.from_frame}2{self.to_frame}"


class TopicStats(BaseModel):
    """Categorized topic statistics as of ``checked_time``."""

    model_config = ConfigDict(frozen=True)

    checked_time: float = 0.0
    ok_list: tuple[TopicConfig, ...] = ()
    non_received_list: tuple[TopicConfig, ...] = ()
    # (config, measured rate [Hz])
    slow_rate_list: tuple[tuple[TopicConfig, float], ...] = ()
    # (config, last received time [s])
    timeout_list: tuple[tuple[TopicConfig, float], ...] = ()


class TfStats(BaseModel):
    """Categorized transform statistics as of ``checked_time``."""

    model_config = ConfigDict(frozen=True)

    checked_time: float = 0.0
    ok_list: tuple[TfConfig, ...] = ()
    # (config, last received time [s])
    timeout_list: tuple[tuple[TfConfig, float], ...] = ()


class StateSnapshot(BaseModel):
    """Everything the evaluators read during one tick."""

    model_config = ConfigDict(frozen=True)

    topic_stats: TopicStats = Field(default_factory=TopicStats)
    tf_stats: TfStats = Field(default_factory=TfStats)


def load_snapshot(path: str | Path) -> StateSnapshot:
    """Read and validate a JSON snapshot file.

    Args:
        path: Path to a JSON document shaped like ``StateSnapshot``

    Returns:
        Validated, frozen snapshot

    Raises:
        FileNotFoundError: If the file does not exist
        pydantic.ValidationError: If the document is malformed

    Example document:
        {
          "topic_stats": {
            "checked_time": 15.0,
            "timeout_list": [
              [{"module": "perception", "name": "lidar_points", "timeout": 1.0}, 12.34]
            ]
          },
          "tf_stats": {
            "ok_list": [{"module": "localization", "from": "map", "to": "base_link"}]
          }
        }
    """
    text = Path(path).read_text(encoding="utf-8")
    return StateSnapshot.model_validate_json(text)
