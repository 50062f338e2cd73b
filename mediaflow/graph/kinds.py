""" Node kinds and their typed configuration. """
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Type


class NodeKind(str, Enum):
    INPUT_VIDEO = "inputVideo"
    INPUT_AUDIO = "inputAudio"
    VIEW_VIDEO = "viewVideo"
    CONVERT_VIDEO = "convertVideo"
    CONVERT_AUDIO = "convertAudio"
    INFO_VIDEO = "infoVideo"
    INFO_AUDIO = "infoAudio"
    GRID_VIEW = "gridView"
    SEQUENCE_EXTRACT = "sequenceExtract"
    TRIM_VIDEO = "trimVideo"
    TRIM_AUDIO = "trimAudio"
    VMAF_ANALYSIS = "vmafAnalysis"
    SPECTRUM_ANALYZER = "spectrumAnalyzer"


@dataclass
class NodeConfig:
    """Base for per-kind configuration. Only user-chosen settings live here,
    runtime results stay in the node's data bag."""

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "NodeConfig":
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})

    def to_data(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class InputConfig(NodeConfig):
    filePath: str = ""


@dataclass
class PreviewConfig(NodeConfig):
    pass


@dataclass
class GridViewConfig(NodeConfig):
    gridSize: int = 3


@dataclass
class MetadataConfig(NodeConfig):
    pass


@dataclass
class ConvertVideoConfig(NodeConfig):
    format: str = "mp4"
    quality: str = "medium"
    outputPath: str = ""
    useGPU: bool = False
    gpuType: str = "auto"


@dataclass
class ConvertAudioConfig(NodeConfig):
    format: str = "mp3"
    quality: str = "medium"
    outputPath: str = ""
    sampleRate: str = "original"
    bitrate: str = "auto"
    bitrateMode: str = "auto"  # auto, custom, vbr
    customBitrate: str = ""
    vbrQuality: str = "5"
    channels: str = "original"
    codec: str = "mp3"
    normalize: bool = False
    volumeGain: str = "0"


@dataclass
class SequenceExtractConfig(NodeConfig):
    format: str = "png"
    compression: str = "medium"
    size: str = "original"
    outputPath: str = ""
    fps: str = "original"
    quality: str = "high"


@dataclass
class TrimConfig(NodeConfig):
    startTime: float = 0
    endTime: float = 60
    duration: float = 60


@dataclass
class VmafConfig(NodeConfig):
    model: str = "default"
    pooling: str = "mean"
    outputFormat: str = "json"
    confidenceInterval: bool = True


@dataclass
class SpectrumConfig(NodeConfig):
    audioFile: str = ""
    sensitivity: int = 80
    smoothing: float = 0.8
    barCount: int = 64
    showFreqLabels: bool = True
    gainBoost: float = 1.5


_CONFIG_MAP: Dict[NodeKind, Type[NodeConfig]] = {
    NodeKind.INPUT_VIDEO: InputConfig,
    NodeKind.INPUT_AUDIO: InputConfig,
    NodeKind.VIEW_VIDEO: PreviewConfig,
    NodeKind.GRID_VIEW: GridViewConfig,
    NodeKind.INFO_VIDEO: MetadataConfig,
    NodeKind.INFO_AUDIO: MetadataConfig,
    NodeKind.CONVERT_VIDEO: ConvertVideoConfig,
    NodeKind.CONVERT_AUDIO: ConvertAudioConfig,
    NodeKind.SEQUENCE_EXTRACT: SequenceExtractConfig,
    NodeKind.TRIM_VIDEO: TrimConfig,
    NodeKind.TRIM_AUDIO: TrimConfig,
    NodeKind.VMAF_ANALYSIS: VmafConfig,
    NodeKind.SPECTRUM_ANALYZER: SpectrumConfig,
}

# id prefix used by the palette when a node is placed
_PALETTE_PREFIX: Dict[NodeKind, str] = {
    NodeKind.INPUT_VIDEO: "input",
    NodeKind.INPUT_AUDIO: "input_audio",
    NodeKind.VIEW_VIDEO: "view",
    NodeKind.GRID_VIEW: "grid",
    NodeKind.INFO_VIDEO: "info",
    NodeKind.INFO_AUDIO: "info_audio",
    NodeKind.CONVERT_VIDEO: "convert",
    NodeKind.CONVERT_AUDIO: "convert_audio",
    NodeKind.SEQUENCE_EXTRACT: "sequence",
    NodeKind.TRIM_VIDEO: "trim",
    NodeKind.TRIM_AUDIO: "trim_audio",
    NodeKind.VMAF_ANALYSIS: "vmaf",
    NodeKind.SPECTRUM_ANALYZER: "spectrum",
}


def config_class(kind: NodeKind) -> Type[NodeConfig]:
    cls = _CONFIG_MAP.get(NodeKind(kind))
    if not cls:
        raise ValueError(f"Unsupported node kind: {kind}")
    return cls


def config_for(kind: NodeKind, data: Dict[str, Any]) -> NodeConfig:
    """Typed view over a node's data bag."""
    return config_class(kind).from_data(data)


def default_data(kind: NodeKind) -> Dict[str, Any]:
    return config_class(kind)().to_data()


def palette_prefix(kind: NodeKind) -> str:
    return _PALETTE_PREFIX[NodeKind(kind)]
