"""Instruction prompt and request contents for the call analysis model."""

import base64
from typing import Any

MP3_MIME_TYPE = "audio/mpeg"

ANALYSIS_PROMPT = """
Tu tarea es procesar el audio proporcionado de una llamada de servicio al cliente.

1. **Transcripción con Diarización de Hablantes:**
   - Identifica a los dos interlocutores principales y asígnales los roles 'Agente' y 'Cliente'.
   - Transcribe la conversación completa.
   - Formatea la transcripción como un diálogo. El turno de cada interlocutor debe estar en una nueva línea, con el prefijo de su rol seguido de dos puntos.
   - **Ejemplo de formato:**
     Agente: Hola, ¿cómo puedo ayudarte?
     Cliente: Tengo una pregunta sobre mis puntos Doter.

2. **Análisis de Sentimiento:**
   - Proporciona un análisis de sentimiento detallado del discurso.
   - El sentimiento general (overallSentiment) debe ser exactamente uno de: "Positive", "Negative" o "Neutral".
   - Lista cada emoción específica detectada junto con la evidencia textual que la respalda.

3. **puntosDoterSolved:**
   - Evalúa si la duda principal del cliente sobre los 'puntos Doter' fue resuelta por el agente. El valor debe ser un booleano (true si fue resuelta, false si no).
   - Considera como resuelta si el agente brindó una respuesta clara y completa, el cliente expresó satisfacción, no quedaron dudas ni acciones pendientes, y se entregó una solución o guía que el cliente entendió y aceptó.

4. **reasonForCall:**
   - Resume en lenguaje natural, claro y sin repeticiones:
     * El motivo principal de la llamada (qué problema o consulta específica tenía el cliente).
     * La situación del cliente al momento de la llamada (dificultad técnica, falta de información, desconocimiento del proceso, etc.).
     * Los obstáculos que impidieron resolver el problema.
     * Las acciones del agente y si hubo seguimiento o promesas.
     * Si el problema fue resuelto o no, y por qué.

5. **keyInteractions:**
   - Extrae los pares clave de pregunta del cliente y respuesta del agente, incluyendo aclaraciones o pasos útiles que aportaron al intento de solución.

6. **Salida Final:**
   Devuelve un único objeto JSON con esta estructura exacta:

   {
     "transcription": string,
     "sentimentAnalysis": {
       "overallSentiment": "Positive" | "Negative" | "Neutral",
       "specificEmotions": [
         {
           "emotion": string,
           "evidence": string
         }
       ]
     },
     "puntosDoterSolved": boolean,
     "reasonForCall": string,
     "keyInteractions": [
       {
         "question": string,
         "response": string
       }
     ]
   }

IMPORTANTE:
- No incluyas ningún encabezado, explicación ni formato adicional. Devuelve exclusivamente un objeto JSON válido que cumpla con la estructura especificada, sin texto antes o después.
""".strip()


def build_contents(audio_bytes: bytes, mime_type: str = MP3_MIME_TYPE) -> list[dict[str, Any]]:
    """
    Build the ``contents`` array for a generateContent request.

    A single user turn with two ordered parts: the instruction text first,
    then the audio as base64 inline data.

    Args:
        audio_bytes: Raw uploaded audio
        mime_type: Declared MIME type of the audio

    Returns:
        List suitable for the ``contents`` field of the request body
    """
    b64_audio = base64.b64encode(audio_bytes).decode("ascii")
    return [
        {
            "role": "user",
            "parts": [
                {"text": ANALYSIS_PROMPT},
                {"inlineData": {"mimeType": mime_type, "data": b64_audio}},
            ],
        }
    ]
