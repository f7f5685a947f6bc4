import asyncio
import sys


async def main(workflow_name: str):
    """Main entry point for running workflows."""
    if workflow_name == "enrich":
        from workflows.enrich_venues import run
        await run()
    elif workflow_name == "enrich-quick":
        from workflows.enrich_venues import run
        await run(quick=True)
    elif workflow_name == "schedule":
        from workflows.scheduler import run_forever
        from services.enrichment.config import EnrichmentConfig
        config = EnrichmentConfig.from_env()
        await run_forever(interval_hours=config.interval_hours, initial_delay=config.initial_delay)
    else:
        print(f"Unknown workflow: {workflow_name}")
        sys.exit(1)


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python main.py <enrich|enrich-quick|schedule>")
        sys.exit(1)

    workflow_name = sys.argv[1]
    asyncio.run(main(workflow_name))
