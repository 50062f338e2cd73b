"""Tests for node kinds and their typed configuration."""

import pytest
from mediaflow.graph.kinds import ConvertAudioConfig, NodeKind, TrimConfig, config_for, default_data, palette_prefix
from mediaflow.graph.models import Node


def test_every_kind_has_defaults_and_prefix():
    for kind in NodeKind:
        assert isinstance(default_data(kind), dict)
        assert palette_prefix(kind)


def test_config_view_ignores_runtime_fields():
    data = {"startTime": 3, "endTime": 9, "duration": 6, "videoPath": "/x.mp4", "isProcessing": True}
    config = config_for(NodeKind.TRIM_VIDEO, data)

    assert config == TrimConfig(startTime=3, endTime=9, duration=6)
    assert config.to_data() == {"startTime": 3, "endTime": 9, "duration": 6}


def test_config_fills_missing_settings_with_defaults():
    config = config_for(NodeKind.CONVERT_AUDIO, {"format": "flac"})
    assert isinstance(config, ConvertAudioConfig)
    assert config.format == "flac"
    assert config.bitrateMode == "auto"


def test_node_accepts_wire_kind_string():
    node = Node(id="n", type="spectrumAnalyzer")
    assert node.type is NodeKind.SPECTRUM_ANALYZER


def test_unknown_kind_is_rejected():
    with pytest.raises(ValueError):
        Node(id="n", type="teleporter")
