"""
Prompts and fixed document text for the code review agent.
"""

CODE_REVIEW_USER_PROMPT_TEMPLATE = """You are an expert code reviewer with a deep understanding of software engineering best practices.

I will provide you with code to review and some relevant guidelines from our team's coding standards.

Please analyze the code according to our guidelines and provide a comprehensive review, focusing on:
1. Code quality and readability
2. Potential bugs or edge cases
3. Performance considerations
4. Security issues
5. Alignment with best practices and our guidelines

Repository URL: {repository_url}

Relevant guidelines from our team's standards:
{guidelines}

Code to review:
```
{code}
```

Please provide a well-structured review with specific recommendations for improvement.
Be constructive and thorough, but also concise and focused on the most important issues."""

DEFAULT_GUIDELINE_TITLE = "Guideline"

REVIEW_SUMMARY_HEADING = "# Code Review Summary\n\n"

PROJECT_REVIEW_INTRO = "The following files were reviewed:\n\n"

CHUNKED_REVIEW_INTRO_TEMPLATE = "This is a review of a large file that was processed in {total} chunks.\n\n"

CHUNK_HEADING_TEMPLATE = "## Chunk {index} of {total}\n\n"

CHUNK_LABEL_TEMPLATE = "{repository_url} (Chunk {index} of {total})"

FILE_HEADING_TEMPLATE = "## File: {path}\n\n"

FINAL_SUMMARY = (
    "# Final Summary\n\n"
    "This review was generated by processing a large file in chunks. "
    "Please review the individual chunk analyses above for specific issues and recommendations.\n\n"
)

CHUNK_ERROR_TEMPLATE = "Error reviewing this chunk: {message}"

FILE_ERROR_TEMPLATE = "Error reviewing this file: {message}"

NO_FILES_MESSAGE = (
    "No suitable files were found for review in the repository. This may be because:\n"
    "1. The repository is empty or contains no supported file types\n"
    "2. All code files are in ignored directories\n"
    "3. There was an issue accessing the files from the repository\n\n"
    "Please check that your repository contains code files with supported extensions and try again."
)
