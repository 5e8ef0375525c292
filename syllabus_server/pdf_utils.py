# -*- coding: utf-8 -*-
import os
from pathlib import Path

import pdfplumber
import requests
import tempfile

TEXT_SUFFIXES = (".txt", ".text", ".md")


def _is_url(path_or_url: str) -> bool:
    return path_or_url.startswith('http://') or path_or_url.startswith('https://')


def _load_pdf_path(path_or_url: str) -> str:
    """
    Loads a PDF from a local path or a URL and returns the local file path.
    :param path_or_url: A local file path or a URL to a PDF file.
    :return: The local file path to the PDF.
    """
    if _is_url(path_or_url):
        response = requests.get(path_or_url, timeout=60)
        response.raise_for_status()
        with tempfile.NamedTemporaryFile(delete=False, suffix=".pdf") as tmp_file:
            tmp_file.write(response.content)
            return tmp_file.name
    else:
        path = Path(path_or_url)
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        return str(path)


def extract_pdf_pages(path_or_url: str) -> list[str]:
    """
    Extracts text from a local or remote PDF, one string per non-empty page.
    :param path_or_url: A local file path or a URL to a PDF file.
    :return: The text contents of the PDF
    """
    pdf_path = _load_pdf_path(path_or_url)
    pages: list[str] = []
    try:
        with pdfplumber.open(pdf_path) as pdf:
            for page in pdf.pages:
                text = page.extract_text()
                if text:
                    pages.append(text.strip())
    finally:
        # Downloaded copies are temporary; local files are left alone
        if _is_url(path_or_url):
            os.unlink(pdf_path)
    return pages


def load_syllabus_text(path_or_url: str) -> str:
    """
    Loads syllabus text from a plain-text file, a PDF, or a URL to either.
    PDF pages are joined with blank lines so every schedule row stays on its own line.
    :param path_or_url: A local file path or an http(s) URL.
    :return: The syllabus text.
    """
    if _is_url(path_or_url):
        if path_or_url.lower().split("?", 1)[0].endswith(".pdf"):
            return "\n\n".join(extract_pdf_pages(path_or_url))
        response = requests.get(path_or_url, timeout=60)
        response.raise_for_status()
        return response.text

    path = Path(path_or_url)
    if not path.is_file():
        raise FileNotFoundError(f"File not found: {path}")
    if path.suffix.lower() == ".pdf":
        return "\n\n".join(extract_pdf_pages(str(path)))
    return path.read_text(encoding="utf-8")
