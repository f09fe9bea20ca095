# =============================================================================
# Services Package — Business Logic
# =============================================================================
# Contains the core logic, separated from API handlers:
#   - simulation.py: canned seed dataset (SimulatedRecordStore)
#   - record_store.py: live reads + schema administration (RecordStore)
#   - output_components.py: presentation-neutral views of responses
#   - report_factory.py: request → ReportConfiguration
#   - analysis.py: employee investment statistics + report narratives
#   - narrative.py: prompt shapes over the LLM provider
#   - llm.py: multi-provider LLM abstraction (Anthropic, OpenAI-compatible)
# =============================================================================
