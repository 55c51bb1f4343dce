"""Core file tree package exposing the tree store, its models and algorithms."""

from .browser import FolderBrowser
from .errors import InvalidTargetError, NotAFolderError, NotFoundError, TreeError
from .models import Breadcrumb, FileNode, FolderNode, Node, NodeInfo, NodeSummary, UploadItem, coerce_upload_item
from .navigation import enter_folder, navigate_to
from .search import search
from .seed import default_seed, load_seed
from .sorting import SortDirection, SortKey, sort_nodes
from .tree import ROOT_ID, TreeStore

__all__ = [
    "Breadcrumb",
    "FileNode",
    "FolderBrowser",
    "FolderNode",
    "InvalidTargetError",
    "Node",
    "NodeInfo",
    "NodeSummary",
    "NotAFolderError",
    "NotFoundError",
    "ROOT_ID",
    "SortDirection",
    "SortKey",
    "TreeError",
    "TreeStore",
    "UploadItem",
    "coerce_upload_item",
    "default_seed",
    "enter_folder",
    "load_seed",
    "navigate_to",
    "search",
    "sort_nodes",
]
