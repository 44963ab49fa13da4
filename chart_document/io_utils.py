from __future__ import annotations
from typing import Dict, Any, Union
import json
import os

from .assembler import Document

def document_to_dict(doc: Union[Document, str]) -> Dict[str, Any]:
    return json.loads(doc.text if isinstance(doc, Document) else doc)

def write_document(doc: Union[Document, str], path: str) -> str:
    """Write the document text verbatim; parent directories are created."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(doc.text if isinstance(doc, Document) else doc)
    return path

def read_document(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
