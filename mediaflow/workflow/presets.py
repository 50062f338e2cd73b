""" Built-in workflow templates. """
from typing import List

from .codec import workflows_from_yaml
from .models import Workflow

PRESETS_YAML = """
- id: quick-convert
  name: Quick Convert
  description: Simple video format conversion
  category: preset
  nodes:
    - id: input-1
      type: inputVideo
      position: { x: 100, y: 200 }
      data: { filePath: "" }
    - id: convert-1
      type: convertVideo
      position: { x: 400, y: 200 }
      data: { format: mp4, quality: medium, outputPath: "", useGPU: false, gpuType: auto }
  edges:
    - { id: e1-2, source: input-1, target: convert-1, sourceHandle: video-output, targetHandle: video-input }

- id: quality-analysis
  name: Quality Analysis
  description: Compare two videos with VMAF
  category: preset
  nodes:
    - id: ref-1
      type: inputVideo
      position: { x: 100, y: 150 }
      data: { filePath: "" }
    - id: test-1
      type: inputVideo
      position: { x: 100, y: 350 }
      data: { filePath: "" }
    - id: vmaf-1
      type: vmafAnalysis
      position: { x: 400, y: 250 }
      data: { model: default, pooling: mean, outputFormat: json, confidenceInterval: true }
  edges:
    - { id: e1-3, source: ref-1, target: vmaf-1, sourceHandle: video-output, targetHandle: reference-input }
    - { id: e2-3, source: test-1, target: vmaf-1, sourceHandle: video-output, targetHandle: test-input }

- id: frame-extraction
  name: Frame Extraction
  description: Extract frames from video
  category: preset
  nodes:
    - id: input-1
      type: inputVideo
      position: { x: 100, y: 200 }
      data: { filePath: "" }
    - id: sequence-1
      type: sequenceExtract
      position: { x: 400, y: 200 }
      data: { format: png, compression: medium, size: original, outputPath: "", fps: original, quality: high }
  edges:
    - { id: e1-2, source: input-1, target: sequence-1, sourceHandle: video-output, targetHandle: video-input }
"""


def load_presets() -> List[Workflow]:
    return workflows_from_yaml(PRESETS_YAML)
