"""
PDFCore - portable document templates for a visual PDF editor

Converts between the live markup tree of the visual editing surface and the
portable, versioned template package consumed by the PDFCore rendering engine.

Architecture:
- Templating Context: node model, markup export/import, asset collection
- Packaging Context: .pdfCoret archive codec (layout, manifest, styles, assets)
- Rendering Context: boundary to the external rendering engine
"""

__version__ = "0.1.0"
