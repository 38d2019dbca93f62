"""
Projection Layer

  Tables:   skill-centric and person-centric rows
  Chart:    weighted hierarchy + leaf descriptors for external collaborators
  Service:  signature-keyed assembly of a complete WorkspaceView
"""

from .table_types import ContributorRow, PersonSkillRow, PersonTableRow, SkillTableRow
from .tables import project_person_rows, project_skill_rows, rows_to_dicts
from .chart import (
    GeometryPartitioner,
    LayoutResult,
    LeafDescriptor,
    WeightedNode,
    build_leaf_descriptors,
    build_weighted_hierarchy,
    layout,
    leaf_weight,
)
from .service import ProjectionService, WorkspaceView

__all__ = [
    # Types
    "ContributorRow",
    "PersonSkillRow",
    "PersonTableRow",
    "SkillTableRow",
    "WeightedNode",
    "LeafDescriptor",
    "LayoutResult",
    "GeometryPartitioner",
    "WorkspaceView",
    # Services
    "ProjectionService",
    # Functions
    "project_skill_rows",
    "project_person_rows",
    "rows_to_dicts",
    "build_weighted_hierarchy",
    "build_leaf_descriptors",
    "layout",
    "leaf_weight",
]
