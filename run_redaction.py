"""
Runs the redaction core over a recorded service round trip.

Reads (default path, or the first CLI argument):
  - redaction_io/example_round_trip.json
      {
        "request":             {... AnonymizeRequest fields ...},
        "analyzer_results":    [... analyzer records ...],
        "anonymizer_response": {"text": ..., "items": [...]},
        "display_names":       {"PERSON": "PERSOON", ...}      (optional)
      }

Produces:
  - redaction_io/redaction_result.json
"""
import json
import logging
import sys
from pathlib import Path

from entity_redaction.config.settings import ANALYZER_URL, ANONYMIZER_URL, LOG_LEVEL
from entity_redaction.models.anonymize_io import AnonymizeRequest
from entity_redaction.postprocessing.pipeline import RedactionOrchestrator
from entity_redaction.postprocessing.service_payloads import service_endpoint

# ---------------------------------------------------------------------------
# Setup logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger("run_redaction")

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
ROOT = Path(__file__).parent
IO_DIR = ROOT / "redaction_io"

INPUT_FILE = Path(sys.argv[1]) if len(sys.argv) > 1 else IO_DIR / "example_round_trip.json"
OUTPUT_FILE = IO_DIR / "redaction_result.json"

# ---------------------------------------------------------------------------
# Load inputs
# ---------------------------------------------------------------------------
logger.info("Loading round trip from %s", INPUT_FILE)

with open(INPUT_FILE, encoding="utf-8") as f:
    round_trip: dict = json.load(f)

request = AnonymizeRequest.model_validate(round_trip["request"])
analyzer_results = round_trip.get("analyzer_results", [])
anonymizer_response = round_trip.get("anonymizer_response", {})
display_names: dict = round_trip.get("display_names") or {}

orchestrator = RedactionOrchestrator(display_names=display_names)

# ---------------------------------------------------------------------------
# Step 1: analyzer request (what would be POSTed)
# ---------------------------------------------------------------------------
analyzer_payload = orchestrator.build_analyzer_request(request)
logger.info("Analyzer request → %s", service_endpoint(ANALYZER_URL, "analyze"))
logger.info("language          : %s", analyzer_payload["language"])
logger.info("entity filter     : %s", analyzer_payload.get("entities", "all"))

# ---------------------------------------------------------------------------
# Step 2: filter recorded analyzer results
# ---------------------------------------------------------------------------
prepared = orchestrator.prepare_redaction(request, analyzer_results)
logger.info("Anonymizer request → %s", service_endpoint(ANONYMIZER_URL, "anonymize"))
logger.info("entities kept     : %d of %d", len(prepared.entities), len(analyzer_results))

# ---------------------------------------------------------------------------
# Step 3: post-process recorded anonymizer response
# ---------------------------------------------------------------------------
result = orchestrator.postprocess_redaction(prepared, anonymizer_response)

IO_DIR.mkdir(exist_ok=True)
with open(OUTPUT_FILE, "w", encoding="utf-8") as f:
    json.dump(result.model_dump(), f, ensure_ascii=False, indent=2)

logger.info("Output saved to: %s", OUTPUT_FILE)

# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------
print("\n" + "=" * 70)
print("REDACTION RESULT — SUMMARY")
print("=" * 70)
print(f"Anonymized text : {result.anonymized_text}")
if result.anonymized_html is not None:
    print(f"Anonymized html : {result.anonymized_html}")

print(f"\nFindings ({len(result.findings)}):")
for finding in result.findings:
    print(
        f"  [{finding['entity_type']:16s}] {finding['text']!r:30s} "
        f"conf={finding['confidence'] if finding['confidence'] is not None else '--'}"
    )

print("=" * 70)
print(f"Output: {OUTPUT_FILE}")
print("=" * 70 + "\n")
