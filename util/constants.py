class InternalURIs:
    API = "/api"
    V1 = API + "/v1"
    VALIDATE_API_KEY = V1 + "/validate-api-key"
    KNOWLEDGE_BASES = V1 + "/knowledge-bases"
    KNOWLEDGE_BASE_CHUNKS = KNOWLEDGE_BASES + "/{kb_id}/chunks"
    KNOWLEDGE_BASE_INVALIDATE = KNOWLEDGE_BASES + "/{kb_id}/invalidate"
    EXTRACT_TEXT = KNOWLEDGE_BASES + "/extract-text"
    RETRIEVE_CONTEXT = V1 + "/retrieve-context"
    ANALYZE_HAZARD = V1 + "/analyze-hazard"
    BATCH_ANALYSIS = V1 + "/batch-analysis"
    ANALYZE_ALL = V1 + "/analyze-all"
    REPORT = V1 + "/reports/{report_id}"
    SYSTEM_PROMPTS = V1 + "/system-prompts"
    SYSTEM_PROMPT = SYSTEM_PROMPTS + "/{prompt_id}"
    SYSTEM_PROMPT_RESET = SYSTEM_PROMPT + "/reset"
    SYSTEM_PROMPT_VALIDATE = SYSTEM_PROMPT + "/validate"


class ExternalURIs:
    EMBED_CONTENT = "{base}/models/{model}:embedContent"
    GENERATE_CONTENT = "{base}/models/{model}:generateContent"
    REST = "{base}/rest/v1/{table}"
