"""App — coração do sistema: sessão, casos de uso e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, inicialização, wiring)
- domain/: modelos de domínio (mensagens, eventos, resultados)
- use_cases/: casos de uso (envios outbound, consulta de número)
- sessions/: estado da conexão, ponte de eventos e serviço de sessão
- infra/: implementações concretas (buffer em memória, QR)
- protocols/: contratos/interfaces do cliente de protocolo
- observability/: correlation_id e métricas em log
- constants/: constantes da aplicação

Padrão: app executa; api adapta; fsm governa; utils apoia.
"""
