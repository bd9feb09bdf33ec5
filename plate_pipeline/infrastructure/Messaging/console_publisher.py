import json
from plate_pipeline.domain.Interfaces.event_publisher import IEventPublisher
from plate_pipeline.domain.Models.detection_result import DetectionResult

class ConsolePublisher(IEventPublisher):
    """
    Implementación dummy que imprime las placas aceptadas de forma legible.
    """

    def publish(self, result: DetectionResult) -> None:
        output = result.to_dict()
        if result.image is not None:
            output["image_bytes"] = len(result.image)

        print("📢 Publicando placa:")
        print(json.dumps(output, indent=2, ensure_ascii=False))
