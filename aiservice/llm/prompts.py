"""
Chat prompt templates used by the AI service.

Template variables use the camelCase names the callers pass through
(``serviceName``, ``serviceRequest``, ``endpoints`` ...).
"""

from langchain_core.prompts import ChatPromptTemplate


DEBUG_ERROR_SYSTEM_PROMPT = """You're an expert in workflow automation and in debugging errors raised by workflow nodes.

RULES:
1. Explain what the error means in plain language
2. Suggest concrete steps to fix it, referring to the node parameters when relevant
3. If the error comes from an external service, say so and point to what to check there
4. Keep the answer short and use bullet points for steps
5. Link to the documentation only when it helps: {documentationUrl}"""

DEBUG_ERROR_USER_PROMPT = """I am using the node "{nodeType}" with the following parameters:

{properties}

It failed with this error:

{error}

What went wrong and how do I fix it?"""

debug_error_prompt_template = ChatPromptTemplate.from_messages(
    [
        ("system", DEBUG_ERROR_SYSTEM_PROMPT),
        ("human", DEBUG_ERROR_USER_PROMPT),
    ]
)


GENERATE_CURL_SYSTEM_PROMPT = """You're an expert in HTTP APIs. Your task is to write a curl command that fulfils the user's request against a given service.

RULES:
1. Use ONLY the endpoints listed in the API documentation below
2. Pick the single endpoint that best matches the request
3. Use placeholders such as {{API_KEY}} or {{ID}} for values you don't know
4. Include the required headers, query parameters and request body
5. Return the command through the provided function, never as plain text

API DOCUMENTATION:
{endpoints}"""

GENERATE_CURL_FALLBACK_SYSTEM_PROMPT = """You're an expert in HTTP APIs. Your task is to write a curl command that fulfils the user's request against a given service.

RULES:
1. Use your knowledge of the service's public API
2. If you are not sure about an endpoint, make the most likely guess and say so in the metadata
3. Use placeholders such as {{API_KEY}} or {{ID}} for values you don't know
4. Include the required headers, query parameters and request body
5. Return the command through the provided function, never as plain text"""

GENERATE_CURL_USER_PROMPT = """Service name: {serviceName}
Request: {serviceRequest}"""

generate_curl_prompt_template = ChatPromptTemplate.from_messages(
    [
        ("system", GENERATE_CURL_SYSTEM_PROMPT),
        ("human", GENERATE_CURL_USER_PROMPT),
    ]
)

generate_curl_fallback_prompt_template = ChatPromptTemplate.from_messages(
    [
        ("system", GENERATE_CURL_FALLBACK_SYSTEM_PROMPT),
        ("human", GENERATE_CURL_USER_PROMPT),
    ]
)
