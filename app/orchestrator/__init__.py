from app.orchestrator.orchestrator import DocumentOrchestrator, build_orchestrator

__all__ = ["DocumentOrchestrator", "build_orchestrator"]
