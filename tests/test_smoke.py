"""Public smoke tests for basic module wiring.

Keep these minimal and free of any real-world data.
"""

from __future__ import annotations


def test_imports() -> None:
    import keibaslip
    import keibaslip.application.slips
    import keibaslip.cli.main
    import keibaslip.domain
    import keibaslip.runtime
    import keibaslip.runtime.slip_server
    import keibaslip.slip

    assert keibaslip.__version__
    assert keibaslip.application.slips is not None
    assert keibaslip.cli.main is not None
    assert keibaslip.domain is not None
    assert keibaslip.runtime is not None
    assert keibaslip.runtime.slip_server.app is not None
    assert keibaslip.slip is not None
