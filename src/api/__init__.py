"""API — camada de borda HTTP.

Responsabilidades:
- Receber requests HTTP e eventos do gateway (webhook)
- Autenticar (Bearer JWT) e validar payloads
- Converter resultados do núcleo em respostas JSON
- Falar com o gateway do protocolo (connectors/)

Subpastas:
- connectors/: adapter HTTP do gateway do protocolo
- routes/: endpoints HTTP
- schemas/: modelos pydantic de entrada/saída
- security/: tokens JWT

NÃO PODE conter: FSM, regras de sessão, orquestração de use cases.
"""
