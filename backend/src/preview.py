"""Compose the live preview document from a project's files"""

import re
from typing import List

from src.models import File

PREVIEW_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <style>{CSS}</style>
</head>
<body>
  {HTML}
  <script>
    window.addEventListener('error', function (e) {
      console.error('Error:', e.message);
    });
    {JS}
  </script>
</body>
</html>"""

PLACEHOLDER = re.compile(r"\{(CSS|HTML|JS)\}")


def content_for(files: List[File], language: str) -> str:
    """Content of the first file with the given language, or empty"""
    for file in files:
        if file.language == language:
            return file.content
    return ""


def compose_preview(files: List[File]) -> str:
    parts = {
        "CSS": content_for(files, "css"),
        "HTML": content_for(files, "html"),
        "JS": content_for(files, "javascript"),
    }
    return PLACEHOLDER.sub(lambda m: parts[m.group(1)], PREVIEW_TEMPLATE)
