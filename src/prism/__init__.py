"""Offline spectral path tracer.

This package estimates the radiance arriving at each pixel of a pinhole
camera by stochastic light-transport simulation, with support for:
- Exact ray/sphere, ray/triangle and ray/box intersection kernels
- Sampled spectral power distributions converted to/from RGB and CIE XYZ
- Emitter, Lambertian and specular materials
- Tile-parallel rendering on a pool of worker threads

Subpackages:
    core: Rays, transforms, spectra, render settings, scheduler and integrators
    geometry: Bounding boxes and shape primitives
    materials: Material model and scattering functions
    scene: Scene container, scene description loading and demo scenes
    camera: Pinhole camera with ray generation
    preview: Output encoding utilities
"""

__version__ = "0.1.0"
