"""
plaincost_pipeline.pipelines — Pipeline stage orchestrators.

    from plaincost_pipeline.pipelines import rpp

    summary = await rpp.fetch(cfg)
    result = rpp.build(cfg)
"""
