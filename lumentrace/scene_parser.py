"""
Scene description parser.

Supports JSON and YAML scene files with:
- Camera configuration
- Render settings
- Materials library (named materials are shared between objects)
- Objects (spheres with materials)

Example scene file:
```yaml
camera:
  look_from: [8, 2, 2.5]
  look_at: [0, 0, -1]
  vfov: 35
  aperture: 0.1

render:
  width: 400
  height: 225
  samples: 100
  max_depth: 50

materials:
  ground:
    type: lambertian
    albedo: [0.8, 0.8, 0.0]

  glass:
    type: dielectric
    ref_idx: 1.5

objects:
  - type: sphere
    center: [0, -100.5, -1]
    radius: 100
    material: ground

  - type: sphere
    center: [-1, 0, -1]
    radius: -0.45
    material: glass
```
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, Any, Optional, Tuple
import json
import logging

import yaml

from .vec3 import Vec3, Point3, Color
from .camera import Camera
from .shapes import Sphere, HittableList
from .materials import Material, Lambertian, Metal, Dielectric
from .renderer import RenderSettings

logger = logging.getLogger(__name__)


class SceneParseError(Exception):
    """Error during scene parsing."""
    pass


class SceneParser:
    """Parser for scene description files."""

    def __init__(self):
        self.materials: Dict[str, Material] = {}
        self.objects: HittableList = HittableList()
        self.camera: Optional[Camera] = None
        self.settings: Optional[RenderSettings] = None

    def parse_file(self, filepath: str) -> Tuple[HittableList, Camera, RenderSettings]:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (YAML or JSON)

        Returns:
            Tuple of (scene, camera, settings)
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        content = path.read_text()

        try:
            if path.suffix == '.json':
                data = json.loads(content)
            else:
                # YAML is a superset of JSON
                data = yaml.safe_load(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SceneParseError(f"Cannot read scene file {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise SceneParseError(f"Scene file must contain a mapping: {filepath}")

        logger.debug("Loaded scene description from %s", path)
        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> Tuple[HittableList, Camera, RenderSettings]:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            Tuple of (scene, camera, settings)
        """
        # Render settings first, the camera needs the aspect ratio
        render_data = _require_mapping(data.get('render') or {}, 'render')
        try:
            self._parse_settings(render_data)
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid render settings: {e}") from e

        # Materials before objects (objects reference them)
        if 'materials' in data:
            self._parse_materials(_require_mapping(data['materials'] or {}, 'materials'))

        if 'objects' in data:
            objects_data = data['objects'] or []
            if not isinstance(objects_data, list):
                raise SceneParseError(f"'objects' must be a list, got {type(objects_data).__name__}")
            self._parse_objects(objects_data)

        camera_data = _require_mapping(data.get('camera') or {}, 'camera')
        try:
            self._parse_camera(camera_data)
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid camera: {e}") from e

        return self.objects, self.camera, self.settings

    def _parse_vec3(self, data: Any) -> Vec3:
        """Parse a Vec3 from a list or an {x, y, z} mapping."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Vec3 must have 3 components, got {len(data)}")
            return Vec3(float(data[0]), float(data[1]), float(data[2]))
        elif isinstance(data, dict):
            return Vec3(
                float(data.get('x', 0)),
                float(data.get('y', 0)),
                float(data.get('z', 0))
            )
        else:
            raise SceneParseError(f"Cannot parse Vec3 from: {data}")

    def _parse_color(self, data: Any) -> Color:
        """Parse a Color from a list, an {r, g, b} mapping or a hex string."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Color must have 3 components, got {len(data)}")
            return Color(float(data[0]), float(data[1]), float(data[2]))
        elif isinstance(data, dict):
            return Color(
                float(data.get('r', 0)),
                float(data.get('g', 0)),
                float(data.get('b', 0))
            )
        elif isinstance(data, str):
            if data.startswith('#') and len(data) == 7:
                hex_color = data[1:]
                try:
                    r = int(hex_color[0:2], 16) / 255.0
                    g = int(hex_color[2:4], 16) / 255.0
                    b = int(hex_color[4:6], 16) / 255.0
                except ValueError as e:
                    raise SceneParseError(f"Cannot parse color from string: {data}") from e
                return Color(r, g, b)
            raise SceneParseError(f"Cannot parse color from string: {data}")
        else:
            raise SceneParseError(f"Cannot parse Color from: {data}")

    def _build_material(self, name: str, mat_data: Dict[str, Any]) -> Material:
        mat_data = _require_mapping(mat_data, f"material {name}")
        mat_type = str(mat_data.get('type', 'lambertian')).lower()

        try:
            if mat_type == 'lambertian':
                return Lambertian(self._parse_color(mat_data.get('albedo', [0.5, 0.5, 0.5])))

            elif mat_type == 'metal':
                albedo = self._parse_color(mat_data.get('albedo', [0.8, 0.8, 0.8]))
                return Metal(albedo, float(mat_data.get('fuzz', 0.0)))

            elif mat_type == 'dielectric':
                return Dielectric(float(mat_data.get('ref_idx', 1.5)))
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid material {name}: {e}") from e

        raise SceneParseError(f"Unknown material type: {mat_type}")

    def _parse_materials(self, materials_data: Dict[str, Any]) -> None:
        """Parse materials section."""
        for name, mat_data in materials_data.items():
            self.materials[str(name)] = self._build_material(name, mat_data)

    def _get_material(self, mat_ref: Any) -> Optional[Material]:
        """Get a material by name or inline definition."""
        if mat_ref is None:
            return None
        if isinstance(mat_ref, str):
            if mat_ref not in self.materials:
                raise SceneParseError(f"Unknown material: {mat_ref}")
            return self.materials[mat_ref]
        elif isinstance(mat_ref, dict):
            return self._build_material('<inline>', mat_ref)
        else:
            raise SceneParseError(f"Invalid material reference: {mat_ref}")

    def _parse_objects(self, objects_data: list) -> None:
        """Parse objects section."""
        for index, obj_data in enumerate(objects_data):
            obj_data = _require_mapping(obj_data, f"object {index}")
            obj_type = str(obj_data.get('type', 'sphere')).lower()
            if obj_type != 'sphere':
                raise SceneParseError(f"Unknown object type: {obj_type}")

            material = self._get_material(obj_data.get('material'))
            try:
                center = self._parse_vec3(obj_data.get('center', [0, 0, 0]))
                radius = float(obj_data.get('radius', 1.0))
            except (TypeError, ValueError) as e:
                raise SceneParseError(f"Invalid sphere (object {index}): {e}") from e
            self.objects.add(Sphere(center, radius, material))

    def _parse_camera(self, camera_data: Dict[str, Any]) -> None:
        """Parse camera section, focusing on the look-at point by default."""
        look_from = self._parse_vec3(camera_data.get('look_from', [0, 0, 0]))
        look_at = self._parse_vec3(camera_data.get('look_at', [0, 0, -1]))
        vup = self._parse_vec3(camera_data.get('vup', [0, 1, 0]))

        if 'focus_dist' in camera_data:
            focus_dist = float(camera_data['focus_dist'])
        else:
            focus_dist = (look_from - look_at).length()

        self.camera = Camera(
            look_from=look_from,
            look_at=look_at,
            vup=vup,
            vfov=float(camera_data.get('vfov', 90.0)),
            aspect_ratio=self.settings.aspect_ratio,
            aperture=float(camera_data.get('aperture', 0.0)),
            focus_dist=focus_dist
        )

    def _parse_settings(self, render_data: Dict[str, Any]) -> None:
        """Parse render settings section."""
        self.settings = RenderSettings(
            width=int(render_data.get('width', 400)),
            height=int(render_data.get('height', 225)),
            samples_per_pixel=int(render_data.get('samples', 100)),
            max_depth=int(render_data.get('max_depth', 50)),
            num_workers=int(render_data.get('workers', 0)),
            seed=render_data.get('seed'),
            gamma_correct=bool(render_data.get('gamma', True)),
            executor=str(render_data.get('executor', 'thread'))
        )


def _require_mapping(data: Any, section: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise SceneParseError(f"'{section}' must be a mapping, got {type(data).__name__}")
    return data


def load_scene(filepath: str) -> Tuple[HittableList, Camera, RenderSettings]:
    """Load a scene from file."""
    return SceneParser().parse_file(filepath)


def parse_scene(data: Dict[str, Any]) -> Tuple[HittableList, Camera, RenderSettings]:
    """Parse a scene from a dictionary."""
    return SceneParser().parse_dict(data)
