"""Tests for generator source emission."""
import pytest

from panelforge.services.template.emitter import GeneratorEmitter
from panelforge.services.template.interpolation import build_secret_bindings

WEB_INDEX_TS = '''import { Output, Services } from "~templates-utils";
import { Input } from "./meta";

export function generate(input: Input): Output {
  const services: Services = [];

  // web Service
  services.push({
    type: "app",
    data: {
      serviceName: input.webServiceName,
      source: {
        type: "image",
        image: input.webServiceImage,
      },
      mounts: [
        // TODO: Handle bind mount: ./nginx.conf:/etc/nginx/nginx.conf
      ],
      domains: [
        {
          host: "$(EASYPANEL_DOMAIN)",
          port: 80,
        },
      ],
    },
  });

  return { services };
}
'''


@pytest.fixture
def render(analyze):
    """Render index.ts for compose text."""
    def _render(text: str) -> str:
        analysis = analyze(text)
        return GeneratorEmitter().render(analysis, build_secret_bindings(analysis.databases))
    return _render


def test_single_web_service(render, web_compose):
    """Bind mounts become review markers and the first port is exposed."""
    assert render(web_compose) == WEB_INDEX_TS


def test_database_and_application(render, postgres_api_compose):
    source = render(postgres_api_compose)

    assert source.startswith('import { Output, randomPassword, Services } from "~templates-utils";')
    assert "  const dbPassword = randomPassword();\n" in source
    assert (
        "  // db Service (postgres)\n"
        "  services.push({\n"
        '    type: "postgres",\n'
        "    data: {\n"
        "      serviceName: input.dbServiceName,\n"
        "      password: dbPassword,\n"
        "    },\n"
        "  });\n"
    ) in source
    assert (
        "        `DATABASE_URL=postgres://app:secret@$(PROJECT_NAME)_${input.dbServiceName}:5432/app`,\n"
    ) in source
    assert "        `PORT=3000`,\n" in source
    assert '      ].join("\\n"),\n' in source
    assert "@db:5432" not in source


def test_declaration_order(render, postgres_api_compose):
    source = render(postgres_api_compose)

    positions = [source.index(f"  // {name} Service") for name in ("db", "api", "worker")]
    assert positions == sorted(positions)
    assert source.index("randomPassword();") < source.index("// db Service")


def test_other_service_command(render, postgres_api_compose):
    source = render(postgres_api_compose)
    worker = source[source.index("// worker Service"):]

    assert 'command: "python worker.py",' in worker
    assert "source:" not in worker


def test_named_volume_entry(render):
    source = render("""
services:
  app:
    image: example/app
    volumes:
      - appdata:/var/lib/app
      - /anonymous
""")
    assert '          type: "volume",\n' in source
    assert '          name: "appdata",\n' in source
    assert '          mountPath: "/var/lib/app",\n' in source
    assert "// TODO: Review unrecognized mount: /anonymous" in source


def test_only_first_port_is_emitted(render):
    source = render("""
services:
  app:
    image: example/app
    ports:
      - "8080:80"
      - "8443:443"
""")
    assert "port: 80," in source
    assert "443" not in source


def test_build_only_service(render):
    source = render("""
services:
  api:
    build: ./api
""")
    assert "// TODO: Configure build source" in source
    assert 'image: "REPLACE_WITH_IMAGE",' in source


def test_command_quotes_are_escaped(render):
    source = render("""
services:
  app:
    image: busybox
    command: sh -c "echo hi"
""")
    assert 'command: "sh -c \\"echo hi\\"",' in source


def test_env_values_are_escaped(render):
    source = render("""
services:
  app:
    image: busybox
    environment:
      PRICE: "$5 `now`"
""")
    assert "        `PRICE=\\$5 \\`now\\``,\n" in source


def test_hyphenated_database(render):
    source = render("""
services:
  my-db:
    image: mysql:8
""")
    assert "const my_dbPassword = randomPassword();" in source
    assert 'serviceName: input["my-dbServiceName"],' in source
    assert 'type: "mysql",' in source


def test_unmanaged_database_is_app_shaped(render):
    source = render("""
services:
  search:
    image: elasticsearch:8.11.0
    ports:
      - "9200"
""")
    assert "const searchPassword = randomPassword();" in source
    assert "// search Service (database)" in source
    assert 'type: "app",' in source
    assert "port: 9200," in source


def test_output_is_deterministic(render, postgres_api_compose):
    assert render(postgres_api_compose) == render(postgres_api_compose)


def test_unquoted_port_mapping(render, git_compose):
    source = render(git_compose)

    assert "port: 22," in source
    assert "133342" not in source
    assert "        `FEATURE=yes`,\n" in source
    assert "        `MODE=0755`,\n" in source
