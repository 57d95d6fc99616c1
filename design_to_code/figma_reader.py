"""
Figma REST API 讀取與文件來源介面

管線只依賴 DocumentClient；不同形狀的外部 client 在這裡轉接：
  - FileNodesDocumentClient：get_file / get_file_nodes（FigmaAPIClient）
  - FileStylesDocumentClient：file / file_styles（figma-js 風格，回應可包在 .data 裡）
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Optional, Tuple
from urllib.parse import parse_qs, unquote, urlparse

import requests

from .errors import DocumentFetchError, StyleFetchError

logger = logging.getLogger(__name__)

# 送進 prompt 的節點樣式欄位
_STYLE_FIELDS = (
    "fills", "strokes", "strokeWeight", "effects", "cornerRadius", "opacity",
    "layoutMode", "itemSpacing", "paddingTop", "paddingRight", "paddingBottom", "paddingLeft",
    "primaryAxisAlignItems", "counterAxisAlignItems", "style", "absoluteBoundingBox",
)


class FigmaAPIClient:
    """Figma REST API 唯讀封裝."""

    BASE_URL = "https://api.figma.com/v1"

    def __init__(self, token: str, timeout: float = 30.0, session: Optional[requests.Session] = None):
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "X-Figma-Token": token,
            "Content-Type": "application/json",
        })

    def get_file(self, file_key: str, node_ids: Optional[list] = None) -> dict:
        url = f"{self.BASE_URL}/files/{file_key}"
        params = {}
        if node_ids:
            params["ids"] = ",".join(node_ids)
        resp = self.session.get(url, params=params, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def get_file_nodes(self, file_key: str, node_ids: list) -> dict:
        url = f"{self.BASE_URL}/files/{file_key}/nodes"
        params = {"ids": ",".join(node_ids)}
        resp = self.session.get(url, params=params, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def get_file_styles(self, file_key: str) -> dict:
        url = f"{self.BASE_URL}/files/{file_key}/styles"
        resp = self.session.get(url, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()


def find_raw_node(node: Any, node_id: str) -> Optional[dict]:
    """在原始節點樹中以 id 找節點（前序）。"""
    if not isinstance(node, dict):
        return None
    if node.get("id") == node_id:
        return node
    for child in node.get("children") or []:
        found = find_raw_node(child, node_id)
        if found is not None:
            return found
    return None


def _describe(exc: Exception) -> str:
    status = getattr(getattr(exc, "response", None), "status_code", None)
    if status == 403:
        return "access denied (token invalid or expired)"
    if status == 404:
        return "not found"
    return str(exc)


class DocumentClient(ABC):
    """管線使用的文件來源介面."""

    @abstractmethod
    def fetch_document(self, document_id: str) -> dict:
        """回傳文件根節點（type=DOCUMENT 的原始 dict）。"""

    @abstractmethod
    def fetch_styles(self, document_id: str, node_id: str) -> dict:
        pass

    def fetch_node(self, document_id: str, node_id: str) -> dict:
        node = find_raw_node(self.fetch_document(document_id), node_id)
        if node is None:
            raise DocumentFetchError(f"Node '{node_id}' not found in document '{document_id}'")
        return node


class FileNodesDocumentClient(DocumentClient):
    """轉接 get_file / get_file_nodes 形狀的 client（例如 FigmaAPIClient）."""

    def __init__(self, client):
        self.client = client

    def fetch_document(self, document_id: str) -> dict:
        try:
            data = self.client.get_file(document_id)
        except requests.RequestException as e:
            raise DocumentFetchError(f"Failed to fetch Figma file '{document_id}': {_describe(e)}") from e
        logger.info("Fetched Figma file %s (%s)", document_id, data.get("name", "untitled"))
        return data.get("document")

    def _node_entry(self, document_id: str, node_id: str) -> dict:
        data = self.client.get_file_nodes(document_id, [node_id])
        return (data.get("nodes") or {}).get(node_id) or {}

    def fetch_node(self, document_id: str, node_id: str) -> dict:
        try:
            entry = self._node_entry(document_id, node_id)
        except requests.RequestException as e:
            raise DocumentFetchError(
                f"Failed to fetch node '{node_id}' of '{document_id}': {_describe(e)}"
            ) from e
        if not entry.get("document"):
            raise DocumentFetchError(f"Node '{node_id}' not found in document '{document_id}'")
        return entry["document"]

    def fetch_styles(self, document_id: str, node_id: str) -> dict:
        try:
            entry = self._node_entry(document_id, node_id)
        except requests.RequestException as e:
            raise StyleFetchError(
                f"Failed to fetch styles of '{node_id}' in '{document_id}': {_describe(e)}"
            ) from e
        node = entry.get("document") or {}
        return {
            "styles": entry.get("styles") or {},
            "node": {key: node[key] for key in _STYLE_FIELDS if key in node},
        }


class FileStylesDocumentClient(DocumentClient):
    """轉接 file / file_styles 形狀的 client；回應可為 dict 或帶 .data 屬性的物件."""

    def __init__(self, client):
        self.client = client

    @staticmethod
    def _payload(resp: Any) -> dict:
        data = getattr(resp, "data", resp)
        return data if isinstance(data, dict) else {}

    def fetch_document(self, document_id: str) -> dict:
        try:
            data = self._payload(self.client.file(document_id))
        except Exception as e:
            raise DocumentFetchError(f"Failed to fetch Figma file '{document_id}': {_describe(e)}") from e
        return data.get("document")

    def fetch_styles(self, document_id: str, node_id: str) -> dict:
        try:
            data = self._payload(self.client.file_styles(document_id))
        except Exception as e:
            raise StyleFetchError(f"Failed to fetch styles of '{document_id}': {_describe(e)}") from e
        styles = (data.get("meta") or {}).get("styles") or []
        return {"styles": [s for s in styles if s.get("node_id") == node_id]}


def parse_figma_url(url: str) -> Tuple[Optional[str], Optional[str]]:
    """
    解析 Figma 網址或 section link，回傳 (file_key, node_id)。

    支援 /file/ 與 /design/ 網址、`KEY?node-id=1-2` 形式的 section link，
    以及單純的 file key。node-id 的 "1-2" 轉為 "1:2"。
    """
    url = unquote(url.strip())
    if not url:
        return None, None

    parsed = urlparse(url)
    match = re.search(r"/(?:file|design|proto)/([a-zA-Z0-9_-]+)", parsed.path)
    if match:
        file_key = match.group(1)
    elif "figma.com" in url:
        return None, None
    else:
        file_key = url.split("?", 1)[0].split("#", 1)[0] or None
        if file_key and not re.fullmatch(r"[a-zA-Z0-9_-]+", file_key):
            return None, None

    node_id = None
    for part in (parsed.query, parsed.fragment):
        qs = parse_qs(part)
        if "node-id" in qs:
            node_id = qs["node-id"][0].replace("-", ":")
            break
    return file_key, node_id
