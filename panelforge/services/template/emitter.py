"""
Generator source emitter.

Renders the template's index.ts: a `generate(input)` function that pushes one
service declaration per compose service. Databases come first (with generated
passwords), then applications, then other services.
"""
import json
from typing import Dict, List

from panelforge.services.docker_compose.analyzer import ComposeAnalysis, detect_database_engine
from panelforge.services.docker_compose.loader import ServiceSpec
from panelforge.services.template.interpolation import (
    EnvInterpolator,
    SecretBinding,
    escape_template_literal,
    input_reference,
)
from panelforge.services.template.schema import service_image_field, service_name_field

BUILD_IMAGE_PLACEHOLDER = "REPLACE_WITH_IMAGE"
DOMAIN_TOKEN = "$(EASYPANEL_DOMAIN)"


def _literal(value: str) -> str:
    """Double-quoted string literal."""
    return json.dumps(value, ensure_ascii=False)


def _comment(text: str) -> str:
    """Single-line comment text."""
    return " ".join(str(text).splitlines())


class GeneratorEmitter:
    """Renders generator source text from an analysis and its secret bindings."""

    def render(self, analysis: ComposeAnalysis, bindings: Dict[str, SecretBinding]) -> str:
        """
        Render index.ts.

        Args:
            analysis: Classified compose services
            bindings: Password bindings, one per database service

        Returns:
            Generator source text (byte-identical for identical input)
        """
        interpolator = EnvInterpolator(bindings)
        lines: List[str] = []

        imports = "Output, randomPassword, Services" if analysis.databases else "Output, Services"
        lines.append(f'import {{ {imports} }} from "~templates-utils";')
        lines.append('import { Input } from "./meta";')
        lines.append("")
        lines.append("export function generate(input: Input): Output {")
        lines.append("  const services: Services = [];")
        lines.append("")

        for name in analysis.databases:
            lines.append(f"  const {bindings[name].variable} = randomPassword();")
        if analysis.databases:
            lines.append("")

        for name in analysis.databases:
            service = analysis.services[name]
            engine = detect_database_engine(service)
            if engine:
                lines.extend(self._database_service(name, engine, bindings[name]))
            else:
                lines.extend(self._app_service(name, service, analysis, interpolator,
                                               label=f"{name} Service (database)"))

        for name in [*analysis.applications, *analysis.others]:
            lines.extend(self._app_service(name, analysis.services[name], analysis, interpolator))

        lines.append("  return { services };")
        lines.append("}")

        return "\n".join(lines) + "\n"

    def _database_service(self, name: str, engine: str, binding: SecretBinding) -> List[str]:
        return [
            f"  // {_comment(name)} Service ({engine})",
            "  services.push({",
            f"    type: {_literal(engine)},",
            "    data: {",
            f"      serviceName: {input_reference(service_name_field(name))},",
            f"      password: {binding.variable},",
            "    },",
            "  });",
            "",
        ]

    def _app_service(self, name: str, service: ServiceSpec, analysis: ComposeAnalysis,
                     interpolator: EnvInterpolator, label: str = None) -> List[str]:
        lines = [
            f"  // {_comment(label or f'{name} Service')}",
            "  services.push({",
            '    type: "app",',
            "    data: {",
            f"      serviceName: {input_reference(service_name_field(name))},",
        ]

        env = analysis.environment(name)
        if env:
            lines.append("      env: [")
            for key, value in env.items():
                lines.append(f"        `{escape_template_literal(key)}={interpolator.rewrite(value)}`,")
            lines.append('      ].join("\\n"),')

        if service.image:
            lines.extend([
                "      source: {",
                '        type: "image",',
                f"        image: {input_reference(service_image_field(name))},",
                "      },",
            ])
        elif service.build:
            lines.extend([
                "      // TODO: Configure build source",
                "      source: {",
                '        type: "image",',
                f"        image: {_literal(BUILD_IMAGE_PLACEHOLDER)},",
                "      },",
            ])

        if service.volumes:
            lines.append("      mounts: [")
            for raw, volume in zip(service.volumes, analysis.volumes(name)):
                if volume is None:
                    lines.append(f"        // TODO: Review unrecognized mount: {_comment(raw)}")
                elif volume.is_bind:
                    lines.append(f"        // TODO: Handle bind mount: {_comment(volume.raw)}")
                else:
                    lines.extend([
                        "        {",
                        '          type: "volume",',
                        f"          name: {_literal(volume.name)},",
                        f"          mountPath: {_literal(volume.container_path)},",
                        "        },",
                    ])
            lines.append("      ],")

        ports = analysis.ports(name)
        if ports:
            # Only the first binding is exposed
            lines.extend([
                "      domains: [",
                "        {",
                f"          host: {_literal(DOMAIN_TOKEN)},",
                f"          port: {ports[0].container_port},",
                "        },",
                "      ],",
            ])

        if service.command:
            command = service.command
            if isinstance(command, list):
                command = " ".join(str(part) for part in command)
            lines.extend([
                "      deploy: {",
                f"        command: {_literal(str(command))},",
                "      },",
            ])

        lines.extend([
            "    },",
            "  });",
            "",
        ])
        return lines
