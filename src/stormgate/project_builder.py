"""
Copyright (C) 2025 Laurent Courty

This program is free software; you can redistribute it and/or
modify it under the terms of the GNU General Public License
as published by the Free Software Foundation; either version 2
of the License, or (at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details.
"""

from typing import Optional

from stormgate.const import ObjectType, NodeType, LinkType, LidType
from stormgate.data_containers import ProjectOptions
from stormgate.lid import LidControl, LidGroup, LidUnit
from stormgate.model import Gage, Node, Link, Subcatchment, Pollutant, OutfallBoundary
from stormgate.project import Project
from stormgate.registry import ObjectRegistry
import stormgate.messenger as msgr


class ProjectBuilder:
    """Builder for creating Project objects from in-memory definitions.
    All the values are given in canonical units (ft, s, cfs).
    Objects are referenced by their ID and resolved at build time.
    """

    def __init__(self, options: Optional[ProjectOptions] = None):
        self.options = options or ProjectOptions()
        self.gages: list[dict] = []
        self.pollutants: list[dict] = []
        self.nodes: list[dict] = []
        self.links: list[dict] = []
        self.subcatchments: list[dict] = []
        self.lid_controls: list[dict] = []
        self.lid_units: list[dict] = []

    def with_options(self, options: ProjectOptions) -> "ProjectBuilder":
        self.options = options
        return self

    def add_gage(self, gage_id: str, **kwargs) -> "ProjectBuilder":
        self.gages.append(dict(id=gage_id, **kwargs))
        return self

    def add_pollutant(self, pollutant_id: str, **kwargs) -> "ProjectBuilder":
        self.pollutants.append(dict(id=pollutant_id, **kwargs))
        return self

    def add_node(
        self, node_id: str, node_type: NodeType = NodeType.JUNCTION, **kwargs
    ) -> "ProjectBuilder":
        self.nodes.append(dict(id=node_id, node_type=node_type, **kwargs))
        return self

    def add_link(
        self,
        link_id: str,
        node1: str,
        node2: str,
        link_type: LinkType = LinkType.CONDUIT,
        **kwargs,
    ) -> "ProjectBuilder":
        self.links.append(dict(id=link_id, node1=node1, node2=node2, link_type=link_type, **kwargs))
        return self

    def add_subcatchment(
        self,
        subcatch_id: str,
        gage: Optional[str] = None,
        out_node: Optional[str] = None,
        out_subcatch: Optional[str] = None,
        **kwargs,
    ) -> "ProjectBuilder":
        self.subcatchments.append(
            dict(id=subcatch_id, gage=gage, out_node=out_node, out_subcatch=out_subcatch, **kwargs)
        )
        return self

    def add_lid_control(self, lid_id: str, lid_type: LidType, **layers) -> "ProjectBuilder":
        """layers are keyword arguments named after the LidControl layers"""
        self.lid_controls.append(dict(id=lid_id, lid_type=lid_type, **layers))
        return self

    def add_lid_unit(
        self,
        subcatch_id: str,
        lid_id: str,
        drain_subcatch: Optional[str] = None,
        drain_node: Optional[str] = None,
        **kwargs,
    ) -> "ProjectBuilder":
        self.lid_units.append(
            dict(
                subcatch=subcatch_id,
                lid=lid_id,
                drain_subcatch=drain_subcatch,
                drain_node=drain_node,
                **kwargs,
            )
        )
        return self

    def build(self) -> Project:
        """Build and return an open project."""
        msgr.debug("Building project...")
        registry = ObjectRegistry()
        for kwargs in self.gages:
            registry.add(ObjectType.GAGE, Gage(**kwargs))
        for kwargs in self.pollutants:
            registry.add(ObjectType.POLLUT, Pollutant(**kwargs))
        for kwargs in self.nodes:
            node = Node(**kwargs)
            if node.node_type == NodeType.OUTFALL and node.outfall is None:
                node.outfall = OutfallBoundary()
            registry.add(ObjectType.NODE, node)
        for kwargs in self.links:
            kwargs = kwargs.copy()
            kwargs["node1"] = registry.find_index(ObjectType.NODE, kwargs["node1"])
            kwargs["node2"] = registry.find_index(ObjectType.NODE, kwargs["node2"])
            registry.add(ObjectType.LINK, Link(**kwargs))
        for kwargs in self.subcatchments:
            kwargs = kwargs.copy()
            kwargs["gage"] = self._resolve(registry, ObjectType.GAGE, kwargs["gage"])
            kwargs["out_node"] = self._resolve(registry, ObjectType.NODE, kwargs["out_node"])
            # outlet subcatchments may be defined later
            del kwargs["out_subcatch"]
            registry.add(ObjectType.SUBCATCH, Subcatchment(**kwargs))
        for kwargs in self.subcatchments:
            if kwargs["out_subcatch"] is not None:
                subcatch = registry.get(
                    ObjectType.SUBCATCH, registry.find_index(ObjectType.SUBCATCH, kwargs["id"])
                )
                subcatch.out_subcatch = registry.find_index(
                    ObjectType.SUBCATCH, kwargs["out_subcatch"]
                )
        for kwargs in self.lid_controls:
            registry.add(ObjectType.LID, LidControl(**kwargs))

        lid_groups = self._create_lid_groups(registry)
        project = Project(registry, self.options, lid_groups)

        # Validate as the input parser does after reading a file
        for lid_index in range(registry.count(ObjectType.LID)):
            project.validator.validate_lid_control(lid_index)
        for subcatch_index in range(registry.count(ObjectType.SUBCATCH)):
            project.validator.validate_subcatchment(subcatch_index)
        for subcatch_index in lid_groups:
            project.validator.validate_lid_group(subcatch_index)
        return project

    @staticmethod
    def _resolve(registry: ObjectRegistry, object_type: ObjectType, object_id) -> int:
        if object_id is None:
            return -1
        return registry.find_index(object_type, object_id)

    def _create_lid_groups(self, registry: ObjectRegistry) -> dict[int, LidGroup]:
        lid_groups: dict[int, LidGroup] = {}
        for kwargs in self.lid_units:
            kwargs = kwargs.copy()
            subcatch_index = registry.find_index(ObjectType.SUBCATCH, kwargs.pop("subcatch"))
            kwargs["lid_index"] = registry.find_index(ObjectType.LID, kwargs.pop("lid"))
            kwargs["drain_subcatch"] = self._resolve(
                registry, ObjectType.SUBCATCH, kwargs["drain_subcatch"]
            )
            kwargs["drain_node"] = self._resolve(registry, ObjectType.NODE, kwargs["drain_node"])
            group = lid_groups.setdefault(subcatch_index, LidGroup())
            group.units.append(LidUnit(**kwargs))
        return lid_groups
