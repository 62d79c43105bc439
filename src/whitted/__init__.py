"""Taichi-based recursive Whitted ray tracer.

This package renders scenes of analytic surfaces lit by point lights, with
shadows, specular reflection and refraction up to a bounded recursion depth.
Frames are split into horizontal bands rendered in parallel.

Subpackages:
    core: Vector algebra, host-side rotations, the shader and the frame scheduler
    geometry: Shape primitives and intersection algorithms
    materials: Phong-style surface materials
    scene: Shape catalog, lights, scene container and nearest-hit queries
    camera: Pinhole camera with ray generation
    preview: Frame buffer export

Taichi must be initialized (``ti.init``) before importing modules that
allocate fields, i.e. everything except ``config`` and ``core.transform``.
"""

__version__ = "0.1.0"
