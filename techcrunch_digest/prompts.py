from dataclasses import dataclass


@dataclass
class Prompts:
    summarizer: str = (
        "Summarize the following article in a concise manner. Focus on the main subject, key facts, "
        "and important details. Format the summary as follows:\n\n"
        "1. Main Subject: [One sentence describing the primary focus of the article]\n"
        "2. Key Facts:\n"
        "   - [3-4 bullet points with the most important information]\n"
        "3. Context: [1-2 sentences providing relevant background or industry context]\n"
        "4. Implications: [1 sentence on potential impact or future outlook]\n\n"
        "Keep the entire summary under 100 words.\n\n"
        "Article Text:\n```{text}```\n"
        "CONCISE SUMMARY:"
    )

    # Used only when an article is too long to stuff into one call.
    partial: str = (
        "The following is one part of a longer article. List the facts it states about the main "
        "subject as short bullet points. Keep names, numbers and dates exact. Do not add anything "
        "that is not in the text.\n\n"
        "Article Part:\n```{text}```\n"
        "FACTS:"
    )
