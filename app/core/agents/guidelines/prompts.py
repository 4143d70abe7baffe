"""
Prompts for guideline document metadata generation.
"""

DESCRIPTION_SYSTEM_PROMPT = """You are a helpful assistant that analyzes documentation page content and generates metadata.
Given the content from a documentation page, generate:
1. A brief description (2-3 sentences) that explains what this content covers

Return your response in JSON format with one field:
- description: The generated description

Do not include any additional text, explanations, or markdown in your response.
Just return the JSON object."""

DESCRIPTION_USER_PROMPT_TEMPLATE = "Generate metadata for this documentation content:\n\n{content}"

FALLBACK_DESCRIPTION = "Content from Confluence page with various code examples and technical information."
