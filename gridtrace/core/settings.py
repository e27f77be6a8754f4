import re
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional
import yaml
from blinker import Signal
from .colors import ColorRGBA, parse_color, to_hex
from .geometry import COLUMN_OVERHANG

logger = logging.getLogger(__name__)

DEFAULT_COUNT = 5
_LEADING_INT = re.compile(r"\s*[-+]?\d+")


def parse_count(value: Any, default: int = DEFAULT_COUNT) -> int:
    """
    Reads a subdivision count typed into a control field. Only the
    leading integer counts, so "4.5" reads as 4 and "12abc" as 12. Text
    without one, or a zero, falls back to `default`; range clamping is
    left to the grid.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value or default
    match = _LEADING_INT.match(str(value))
    if match is None:
        logger.debug(f"Malformed count {value!r}, using {default}")
        return default
    return int(match.group()) or default


@dataclass(frozen=True)
class Palette:
    """Stroke and fill colors, one per semantic role of a grid shape."""

    grid_stroke: ColorRGBA = parse_color("#4d2d52dd")
    row_fill: ColorRGBA = parse_color("rgba(200, 200, 200, .05)")
    row_stroke: ColorRGBA = parse_color("#f49d376a")
    selected_row_fill: ColorRGBA = parse_color("#fada5e4a")
    selected_row_stroke: ColorRGBA = parse_color("#f49d37dd")
    col_stroke: ColorRGBA = parse_color("#3c6c82aa")
    selected_col_stroke: ColorRGBA = parse_color("#083d77dd")
    deselected_stroke: ColorRGBA = parse_color("#aaaaaaaa")

    def to_dict(self) -> Dict[str, str]:
        return {f.name: to_hex(getattr(self, f.name)) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Palette":
        if not isinstance(data, dict):
            return cls()
        known = {f.name for f in fields(cls)}
        values: Dict[str, ColorRGBA] = {}
        for name, raw in data.items():
            if name not in known:
                logger.warning(f"Ignoring unknown palette role '{name}'")
                continue
            try:
                values[name] = parse_color(raw)
            except ValueError as e:
                logger.warning(f"Invalid color for '{name}': {e}")
        return cls(**values)


@dataclass
class GridSettings:
    max_rows: int = 250
    max_cols: int = 250
    default_rows: int = DEFAULT_COUNT
    default_cols: int = DEFAULT_COUNT
    zoom_factor: float = 1.05
    stage_width: float = 1280.0
    stage_height: float = 800.0
    image_padding: float = 60.0
    column_overhang: float = COLUMN_OVERHANG
    palette: Palette = field(default_factory=Palette)

    def __post_init__(self):
        self.max_rows = max(1, int(self.max_rows))
        self.max_cols = max(1, int(self.max_cols))
        self.default_rows = max(1, min(int(self.default_rows), self.max_rows))
        self.default_cols = max(1, min(int(self.default_cols), self.max_cols))
        if self.zoom_factor <= 0:
            logger.warning(
                f"Zoom factor {self.zoom_factor} is not positive, using 1.05"
            )
            self.zoom_factor = 1.05

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_rows": self.max_rows,
            "max_cols": self.max_cols,
            "default_rows": self.default_rows,
            "default_cols": self.default_cols,
            "zoom_factor": self.zoom_factor,
            "stage_width": self.stage_width,
            "stage_height": self.stage_height,
            "image_padding": self.image_padding,
            "column_overhang": self.column_overhang,
            "palette": self.palette.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GridSettings":
        settings = cls()
        kwargs: Dict[str, Any] = {}
        for f in fields(cls):
            if f.name == "palette" or f.name not in data:
                continue
            default = getattr(settings, f.name)
            try:
                kwargs[f.name] = type(default)(data[f.name])
            except (TypeError, ValueError):
                logger.warning(
                    f"Invalid value {data[f.name]!r} for '{f.name}', "
                    f"using {default!r}"
                )
        palette = data.get("palette")
        if isinstance(palette, Palette):
            kwargs["palette"] = palette
        else:
            kwargs["palette"] = Palette.from_dict(palette)
        return cls(**kwargs)


class SettingsManager:
    """Loads and saves GridSettings as a YAML file."""

    def __init__(self, filepath: Path):
        self.filepath = Path(filepath)
        self.settings: GridSettings = GridSettings()
        self.changed = Signal()
        self.load()

    def load(self) -> GridSettings:
        if not self.filepath.exists():
            logger.info(f"No config at {self.filepath}, using defaults")
            self.settings = GridSettings()
            return self.settings

        with open(self.filepath, "r") as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                logger.warning(f"Could not parse {self.filepath}: {e}")
                data = None

        if not isinstance(data, dict):
            self.settings = GridSettings()
        else:
            self.settings = GridSettings.from_dict(data)
        self.changed.send(self)
        return self.settings

    def save(self):
        self.filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(self.filepath, "w") as f:
            yaml.safe_dump(self.settings.to_dict(), f)
        logger.debug(f"Saved config to {self.filepath}")

    def update(self, **changes: Any):
        data = self.settings.to_dict()
        data.update(changes)
        self.settings = GridSettings.from_dict(data)
        self.changed.send(self)
