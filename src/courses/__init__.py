"""Course catalog: courses with embedded modules and lessons."""
