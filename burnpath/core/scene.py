"""
BurnPath Scene Model

An immutable, versioned snapshot of the layers and items being prepared
for the laser. Every editing operation returns a new Scene; the previous
snapshot stays valid, so an emission pass can read one snapshot while the
editor keeps producing new ones.
"""

from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence, Tuple
from uuid import UUID
import logging

from ..errors import LayerRoutingError
from .geometry import BoundingBox
from .items import CanvasItem, items_from_records, printing_method_for, world_polylines
from .layer import Layer, PrintingMethod

logger = logging.getLogger(__name__)

AUTO_LAYER_NAMES = {
    PrintingMethod.SCAN: "Scan Layer",
    PrintingMethod.ENGRAVE: "Engrave Layer",
}


@dataclass(frozen=True)
class Scene:
    """
    Layers and items of one design.

    Items are kept in insertion order; ``items_on`` preserves it per layer.
    """
    layers: Tuple[Layer, ...] = ()
    items: Tuple[CanvasItem, ...] = ()
    version: int = 0

    def _next(self, **changes) -> 'Scene':
        return replace(self, version=self.version + 1, **changes)

    # Lookup

    def get_layer(self, layer_id: UUID) -> Layer:
        for layer in self.layers:
            if layer.id == layer_id:
                return layer
        raise KeyError(f"No layer with id {layer_id}")

    def get_item(self, item_id: UUID) -> CanvasItem:
        for item in self.items:
            if item.id == item_id:
                return item
        raise KeyError(f"No item with id {item_id}")

    def items_on(self, layer_id: UUID) -> List[CanvasItem]:
        """Items of a layer, in insertion order."""
        return [item for item in self.items if item.layer_id == layer_id]

    def layers_for(self, printing_method: PrintingMethod) -> List[Layer]:
        return [layer for layer in self.layers
                if layer.printing_method == printing_method]

    def design_bounds(self, layer_id: Optional[UUID] = None) -> Optional[BoundingBox]:
        """Bounding box of every vector outline (optionally of one layer)."""
        items = self.items if layer_id is None else self.items_on(layer_id)
        box = None
        for item in items:
            for path in world_polylines(item):
                for p in path:
                    point_box = BoundingBox(p.x, p.y, p.x, p.y)
                    box = point_box if box is None else box.union(point_box)
        return box

    # Layers

    def add_layer(self, name: str, printing_method: PrintingMethod,
                  **settings) -> 'Scene':
        layer = Layer.create(name, printing_method, **settings)
        return self._next(layers=self.layers + (layer,))

    def update_layer(self, layer_id: UUID, **changes) -> 'Scene':
        """
        Change layer settings.

        Raises:
            LayerRoutingError: if the change would switch the printing method.
        """
        layer = self.get_layer(layer_id)
        method = changes.get("printing_method", layer.printing_method)
        if method != layer.printing_method:
            raise LayerRoutingError(
                f"Layer '{layer.name}' cannot change from "
                f"{layer.printing_method.value} to {method.value}")
        updated = replace(layer, **changes)
        return self._next(layers=tuple(updated if l.id == layer_id else l
                                       for l in self.layers))

    def delete_layer(self, layer_id: UUID) -> 'Scene':
        """Remove a layer together with every item on it."""
        layer = self.get_layer(layer_id)
        remaining = tuple(item for item in self.items if item.layer_id != layer_id)
        logger.debug(f"Deleting layer '{layer.name}' and "
                     f"{len(self.items) - len(remaining)} items")
        return self._next(
            layers=tuple(l for l in self.layers if l.id != layer_id),
            items=remaining,
        )

    # Items

    def _route(self, item: CanvasItem, layer_id: Optional[UUID]) -> Tuple['Scene', UUID]:
        """Pick (or create) the layer an item goes to."""
        method = printing_method_for(item)
        if layer_id is not None:
            layer = self.get_layer(layer_id)
            if layer.printing_method != method:
                raise LayerRoutingError(
                    f"{type(item).__name__} needs a {method.value} layer, "
                    f"'{layer.name}' is {layer.printing_method.value}")
            return self, layer_id

        candidates = self.layers_for(method)
        if candidates:
            return self, candidates[0].id

        scene = self.add_layer(AUTO_LAYER_NAMES[method], method)
        logger.info(f"Created layer '{AUTO_LAYER_NAMES[method]}' for "
                    f"{type(item).__name__}")
        return scene, scene.layers[-1].id

    def add_item(self, item: CanvasItem, layer_id: Optional[UUID] = None) -> 'Scene':
        """
        Add an item, routing it by its printing method.

        Args:
            item: The item to add
            layer_id: Explicit target layer; when None the first layer with
                a matching printing method is used (created if missing)

        Raises:
            LayerRoutingError: if ``layer_id`` names an incompatible layer.
        """
        scene, target = self._route(item, layer_id)
        placed = replace(item, layer_id=target)
        return scene._next(items=scene.items + (placed,))

    def add_items(self, items: Iterable[CanvasItem],
                  layer_id: Optional[UUID] = None) -> 'Scene':
        scene = self
        for item in items:
            scene = scene.add_item(item, layer_id)
        return scene

    def add_records(self, records: Sequence, layer_id: Optional[UUID] = None) -> 'Scene':
        """Convert imported shape records to items and add them."""
        return self.add_items(items_from_records(records), layer_id)

    def update_item(self, item_id: UUID, **changes) -> 'Scene':
        """Copy-on-write update of item fields; layer changes are routed."""
        scene = self
        if "layer_id" in changes:
            scene = scene.move_item(item_id, changes.pop("layer_id"))
        if not changes:
            return scene
        updated = replace(scene.get_item(item_id), **changes)
        return scene._next(items=tuple(updated if i.id == item_id else i
                                       for i in scene.items))

    def replace_item(self, item_id: UUID, replacements: Sequence[CanvasItem]) -> 'Scene':
        """Swap one item for zero or more items at the same position in the list."""
        self.get_item(item_id)
        items = []
        for item in self.items:
            if item.id == item_id:
                items.extend(replacements)
            else:
                items.append(item)
        return self._next(items=tuple(items))

    def move_item(self, item_id: UUID, layer_id: UUID) -> 'Scene':
        """
        Move an item to another layer.

        Raises:
            LayerRoutingError: if the layer's printing method does not match.
        """
        item = self.get_item(item_id)
        self._route(item, layer_id)
        moved = replace(item, layer_id=layer_id)
        return self._next(items=tuple(moved if i.id == item_id else i
                                      for i in self.items))

    def delete_item(self, item_id: UUID) -> 'Scene':
        self.get_item(item_id)
        return self._next(items=tuple(i for i in self.items if i.id != item_id))
