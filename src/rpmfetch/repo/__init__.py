"""
package cloning and the local cache it feeds
"""

from .cloner import cloned_package, cloner
from .dnf import DnfCloner
from .snapshot import load_snapshot, restore_snapshot, save_snapshot
