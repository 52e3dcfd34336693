"""CPU path tracer with a BVH-accelerated scene and a multi-threaded render loop.

Subpackages:
    core: Vectors, rays, bounding boxes and sampling helpers
    geometry: Primitives, hit records, primitive lists and the BVH
    materials: Scatter models and material presets
    camera: Pinhole/thin-lens camera
    renderer: Path-tracing integrator, concurrent renderer and image output
"""

__version__ = "0.1.0"
