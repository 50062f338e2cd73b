""" Reset of runtime/derived fields in node data. """
from typing import Any, Dict

# media paths chosen per run: kept as keys, blanked
_BLANKED = ("filePath", "outputPath", "audioFile")
# results computed by probing, propagation or execution: dropped
_DROPPED = (
    "videoPath",
    "audioPath",
    "referenceVideoPath",
    "testVideoPath",
    "trimParams",
    "metadata",
    "vmafScore",
    "resetKey",
)
_FLAGS = ("isAnalyzing", "isProcessing")


def reset_runtime_state(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Return a copy of `data` with every transient field cleared, so the node
    reads as "not yet processed". Applying it twice gives the same result.
    """
    out = dict(data)
    for key in _BLANKED:
        if out.get(key):
            out[key] = ""
    for key in _DROPPED:
        out.pop(key, None)
    for key in _FLAGS:
        if key in out:
            out[key] = False
    if "error" in out:
        out["error"] = None
    return out
