"""
Globe engine core: projection, orientation and inertia, fly-to,
hit testing, label layout, decorative fields and the per-frame driver.
"""
